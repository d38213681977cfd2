# ogshell

ogshell is an interactive command shell. It handles the everyday core of a POSIX shell:

- words, including parts in single or double quotes. The quote characters are removed from the words.
- `$NAME` expansion from the shell's environment. Expansion does not happen inside single quotes, or for a `$` written as a heredoc delimiter (`<< $NAME`). A name that is not set expands to nothing.
- `$?`, which expands to the exit status of the previous command line.
- pipelines joined with `|`.
- redirections with `<`, `>` and `>>`, and heredocs with `<<`. Heredoc lines are read from the shell's own input.
- `*` wildcards. They are matched against the names in the current directory, and only the first `*` in a word counts. Names that start with `.` match only patterns that also start with `.`. A pattern that matches nothing is left as it was written.
- the built-in commands `echo` (with `-n`), `cd`, `pwd`, `export`, `unset`, `env` and `exit`.

Other programs are looked up in the directories listed in `PATH`. A name that starts with `/` or `.` is run as given.

## Installation

```
pip install .
```

## Usage

To start the interactive prompt:

```
ogshell
```

An example session:

```
Oud Getrouwd Shell : export GREETING=hello
Oud Getrouwd Shell : echo $GREETING world | cat > out.txt
Oud Getrouwd Shell : cat < out.txt
hello world
Oud Getrouwd Shell : echo $?
0
```

To leave the shell, press Ctrl-D or run `exit`. With Ctrl-D, `exit` is printed and the status is 0. `exit N` ends the shell with status `N`. If the argument is not a number, the status is 255.

Pressing Ctrl-C at the prompt throws away the line you are typing. The quit signal has no effect on the shell, but programs started from it still react to it.

Exit statuses:

- A syntax error, such as a pipe at the start of a line or a redirection with no word after it, is reported on standard error and sets the status to 258.
- A program that cannot be found sets the status to 127.
- A program ended by a signal sets the status to 130.

A built-in command that runs on its own changes the shell itself. Examples are `cd`, `export` and `unset`. Inside a longer pipeline, a built-in works on a copy of the environment, and its changes are discarded.

## What it does not do

`ogshell` accepts no arguments. It only runs the interactive prompt. It cannot run script files and has no `-c` option. It does not support:

- `;`, `&&` or `||`
- background jobs
- subshells
- redirection of file descriptors other than standard input and output

## Using it as a library

Each stage of the shell can be used by itself:

```python
from ogshell.environment import Environment
from ogshell.tokenizer import tokenize, remove_quotes
from ogshell.lexer import check_syntax, ShellSyntaxError
from ogshell.parser import parse
from ogshell.expansion import expand_variables

env = Environment.from_environ({"HOME": "/home/user"})
line = expand_variables("ls $HOME | grep txt > list", env)
tokens = tokenize(line)
check_syntax(tokens)          # raises ShellSyntaxError on bad input
commands = parse(tokens)      # list of Command, one per pipeline stage
```

To run complete lines, use `ogshell.executor.execute_line` with a `ShellState`. It returns the new status and also stores it in `state.last_return`. Output can be captured in any text stream:

```python
import io
from ogshell.environment import Environment
from ogshell.executor import ShellState, execute_line

out = io.StringIO()
state = ShellState(Environment.from_environ({"PATH": "/usr/bin:/bin"}), stdout=out)
execute_line(state, "echo hello")
print(out.getvalue())         # "hello\n"
```

Running `exit` through `execute_line` raises `ogshell.builtins.ShellExit`. The exception carries the status in its `status` attribute.

## Running the tests

```
pip install .[test]
pytest
```
[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ogshell"
version = "0.1.0"
description = "A small interactive shell with pipes, redirections, heredocs, variable expansion and wildcards"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "command-line", "pipeline", "repl", "interpreter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ogshell = "ogshell.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["ogshell"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

# kindkit

Building blocks for a command-line tool that manages local Kubernetes
clusters whose nodes are containers:

- `kindkit.config` – a cluster configuration model with defaulting and validation,
- `kindkit.logger` – a thread-safe, terminal-aware logger with verbosity levels,
- `kindkit.spinner` and `kindkit.status` – a loading spinner and progress status lines,
- `kindkit.process` – running external commands and capturing their output,
- `kindkit.errors` – wrapping and aggregating errors, running work concurrently,
- `kindkit.fs` – copying files and directories, container-friendly temp dirs,
- `kindkit.terminal` – detecting terminals that understand escape codes,
- `kindkit.streams`, `kindkit.version`, `kindkit.app` – the command line itself.

Only the Python standard library is needed (3.10 or later).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

Installing the package adds the `kindkit` command (its help and version
output name the program `kind`):

```
kindkit --help
kindkit --version
kindkit version
```

- `kindkit version` prints a line such as
  `kind v0.11.0-alpha python3.12.1 linux/x86_64`.
- `kindkit --version` prints `kind version 0.11.0-alpha`.
- `kindkit` with no subcommand prints the help.
- `-v N` / `--verbosity N` sets the logger's verbosity.
- `-q` / `--quiet` sends the logger's output nowhere.
- `--loglevel` is deprecated. `debug` maps to verbosity 3 and `trace` to
  the highest verbosity, unless `-v` is also given. Using it logs a
  deprecation warning.
- An unparsable command line logs `ERROR: ...` and exits with status 1.

## Library use

### Cluster configuration

```python
from kindkit.config import Cluster, Node, NodeRole, set_defaults_cluster

cluster = Cluster()
set_defaults_cluster(cluster)   # name "kind", one control-plane node, ipv4, default subnets
cluster.nodes.append(Node(role=NodeRole.WORKER, image="myImage:latest"))
cluster.validate()              # raises if anything is wrong
```

`set_defaults_cluster` fills in the following defaults:

| Setting | IPv4 | IPv6 |
| --- | --- | --- |
| API server address | `127.0.0.1` | `::1` |
| Pod subnet | `10.244.0.0/16` | `fd00:10:244::/56` |
| Service subnet | `10.96.0.0/16` | `fd00:10:96::/112` |

The proxy mode defaults to `iptables`. The node image defaults to
`kindest/node:latest`.

`Cluster.validate` and `Node.validate` collect every problem they find:

- an invalid cluster name,
- an out-of-range port,
- a subnet that is not a CIDR,
- an unknown kube-proxy mode or node role,
- a missing image,
- the lack of a control-plane node.

A single problem is raised as a `KindError`. Several are raised together,
and `kindkit.errors.aggregate_errors(err)` returns them as a list.
`validate_port` accepts `-1` through `65535`. The value `-1` leaves the
port choice to the container backend.

### Logging and status

```python
from kindkit.status import status_for_logger
from kindkit.streams import new_logger, color_enabled

logger = new_logger()   # writes to stderr, through a Spinner on smart terminals
logger.v(0).info("Creating cluster ...")
logger.v(1).infof("detail: %s", "value")   # written only at verbosity >= 1, with a "DEBUG: file:line]" header
logger.set_verbosity(2)

status = status_for_logger(logger)
status.start("Preparing nodes")   # spinner line, or " • Preparing nodes  ..."
status.end(True)                  # " ✓ Preparing nodes"
```

Output rules:

- Every message ends with a newline.
- `Logger.set_writer(None)` discards all output.
- `kindkit.log.NoopLogger` never writes anything.
- Messages use printf-style verbs (`%s %v %q %d ...`).

`kindkit.terminal.is_smart_terminal` decides whether escape codes are
used. It returns false in any of these cases:

- the stream is not a terminal,
- `NO_COLOR` is set,
- `TERM` is `dumb` or `st-256color`,
- on Windows without `WT_SESSION`,
- on Travis CI.

### Running commands

```python
from kindkit.process import command, output_lines, pretty_command

lines = output_lines(command("docker", "image", "ls", "-q"))
print(pretty_command("echo", "hello world"))   # echo 'hello world'
```

A command that cannot start, or that exits non-zero, raises `RunError`.
The error carries `command`, the combined stdout and stderr as `output`,
and the underlying error as `inner`.

Other helpers:

- `output` and `combined_output_lines` return what a command printed.
- `inherit_output` sends a command's output to this process's streams.
- `run_with_stdout_reader` and `run_with_stdin_writer` connect a command to a callback through a pipe.

### Errors and concurrency

```python
from kindkit.errors import aggregate_concurrent, until_error_concurrent, wrap, stack_trace

aggregate_concurrent([task_a, task_b])    # waits for all; raises one error, or an aggregate of several
until_error_concurrent([task_a, task_b])  # raises the first exception to arrive
```

`new`, `errorf`, `wrap`, `wrapf` and `with_stack` build `KindError`s that
record the stack where they were made. `stack_trace` returns the deepest
recorded stack in an error's cause chain.

### Filesystem

- `kindkit.fs.copy` copies files and directories recursively. It
  follows symlinks and keeps file modes.
- `copy_file` copies a single file.
- `temp_dir` creates a temporary directory. On macOS it returns the
  mountable `/private/var/...` path.
- `is_abs` treats POSIX absolute paths as absolute on every platform.

## What it does not do

The command line offers only `version` and the global logging flags.
There are no commands to create, delete, list or export clusters, or to
load images into nodes. The package does not talk to Docker or Podman
itself, and it does not read cluster configuration from YAML files. The
`Cluster` model is built and validated in Python only.
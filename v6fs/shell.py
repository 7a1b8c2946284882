# Copyright (C) 2014 Andrea Bonomi <andrea.bonomi@gmail.com>

# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to
# deal in the Software without restriction, including without limitation the
# rights to use, copy, modify, merge, publish, distribute, sublicense, and/or
# sell copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.

import argparse
import cmd
import os
import shlex
import sys
import traceback
import typing as t

from . import __version__
from .filesystem import V6Filesystem
from .image import BIG_ENDIAN_LAYOUT, LAYOUTS, RawImage

try:
    import readline
except ImportError:
    readline = None  # type: ignore

__all__ = [
    "Shell",
    "main",
]

DEFAULT_IMAGE = "v6root"
HISTORY_FILENAME = "~/.v6fs_history"
HISTORY_LENGTH = 1000


def extract_options(args: t.List[str], *flags: str) -> t.Tuple[t.List[str], t.Dict[str, bool]]:
    """
    Split the arguments in options (-x, combined as -xy) and other arguments
    """
    result: t.List[str] = []
    options: t.Dict[str, bool] = {}
    for arg in args:
        if arg.startswith("-") and len(arg) > 1:
            for flag in flags:
                if flag in arg[1:]:
                    options[flag] = True
        else:
            result.append(arg)
    return result, options


class Shell(cmd.Cmd):
    verbose: bool = False
    fs: V6Filesystem

    def __init__(self, fs: V6Filesystem, verbose: bool = False):
        cmd.Cmd.__init__(self)
        self.fs = fs
        self.verbose = verbose
        self.postcmd(False, "")
        self.history_file = os.path.expanduser(HISTORY_FILENAME)
        # Init readline and history
        if readline is not None:
            if sys.platform == "darwin":
                readline.parse_and_bind("bind ^I rl_complete")
            else:
                readline.parse_and_bind("tab: complete")
                readline.parse_and_bind("set bell-style none")
            readline.set_completer(self.complete)
            try:
                if self.history_file:
                    readline.set_history_length(HISTORY_LENGTH)
                    readline.read_history_file(self.history_file)
            except IOError:
                pass

    def completedefault(self, *ignored: t.Any) -> t.List[str]:
        text: str = ignored[0]
        try:
            return [x.display_name for x in self.fs.list_dir() if x.display_name.startswith(text)]
        except OSError:
            return []

    def postloop(self) -> None:
        if readline is not None:
            # Cleanup and write history file
            readline.set_completer(None)
            try:
                if self.history_file:
                    readline.set_history_length(HISTORY_LENGTH)
                    readline.write_history_file(self.history_file)
            except IOError:
                pass

    def cmdloop(self, intro: t.Optional[str] = None) -> None:
        self.update_prompt()
        try:
            return cmd.Cmd.cmdloop(self, intro)
        except KeyboardInterrupt:
            sys.stdout.write("\n")

    def update_prompt(self) -> None:
        self.prompt = "[%s] > " % self.fs.get_pwd()

    def postcmd(self, stop: bool, line: str) -> bool:
        self.update_prompt()
        return stop

    def onecmd(self, line: str, catch_exceptions: bool = True, batch: bool = False) -> bool:
        try:
            cmd, arg, line = self.parseline(line)
            if not line:
                return self.emptyline()
            if cmd is None or cmd == "":
                self.default(line)
                return False
            self.lastcmd = line
            if line == "EOF":
                self.lastcmd = ""
            try:
                func = getattr(self, "do_" + cmd)
            except AttributeError:
                self.default(line)
                return False
            args = shlex.split(arg) if arg else []
            return bool(func(args))
        except KeyboardInterrupt:
            sys.stdout.write("\n")
            return False
        except SystemExit as ex:
            if not catch_exceptions:
                raise ex
            return True
        except Exception as ex:
            if not catch_exceptions:
                raise ex
            message = str(sys.exc_info()[1])
            sys.stdout.write(f"{message}\n")
            if self.verbose:
                traceback.print_exc()
            if batch:
                raise ex
            return False

    def default(self, line: str) -> bool:
        raise Exception(f"no such command: {line.split()[0]}")

    def emptyline(self) -> bool:
        return False

    def do_ls(self, args: t.List[str]) -> None:
        # fmt: off
        """
LS              Lists the directory

  SYNTAX
        LS [-l] [path]

  SEMANTICS
        Lists the names of the entries of the current directory,
        in on-disk order, or of the given directory.

  OPTIONS
   -l
        Shows the type, permissions and size of the entries

        """
        # fmt: on
        args, options = extract_options(args, "l")
        path = args[0] if args else None
        for line in self.fs.ls(path, long=options.get("l", False)):
            sys.stdout.write(f"{line}\n")

    def do_cd(self, args: t.List[str]) -> None:
        # fmt: off
        """
CD              Changes the current directory

  SYNTAX
        CD [path]

  SEMANTICS
        Without arguments, changes to the root directory.
        The current directory is not changed on error.

        """
        # fmt: on
        dest = args[0] if args else "/"
        try:
            self.fs.chdir(dest)
        except NotADirectoryError as ex:
            raise Exception(f"{dest} is not directory") from ex
        except FileNotFoundError as ex:
            raise Exception(f"directory not found: {dest}") from ex

    def do_pwd(self, args: t.List[str]) -> None:
        # fmt: off
        """
PWD             Displays the current directory

  SYNTAX
        PWD

        """
        # fmt: on
        sys.stdout.write(f"{self.fs.get_pwd()}\n")

    def do_stat(self, args: t.List[str]) -> None:
        # fmt: off
        """
STAT            Displays an inode

  SYNTAX
        STAT [path|#inode number]

  SEMANTICS
        Displays the fields of the inode of a file or a directory,
        and the entries of directories. Without arguments,
        displays the current directory.

        """
        # fmt: on
        sys.stdout.write(self.fs.examine(args[0] if args else None))
        sys.stdout.write("\n")

    def do_super(self, args: t.List[str]) -> None:
        # fmt: off
        """
SUPER           Displays the superblock

  SYNTAX
        SUPER

        """
        # fmt: on
        superblock = self.fs.superblock
        sys.stdout.write(f"{superblock}\n")
        for problem in superblock.check(self.fs.image):
            sys.stdout.write(f"warning: {problem}\n")

    def do_dump(self, args: t.List[str]) -> None:
        # fmt: off
        """
DUMP            Prints blocks in hexadecimal

  SYNTAX
        DUMP start [end]

        """
        # fmt: on
        if not args:
            raise Exception("missing block number")
        try:
            start = int(args[0])
            end = int(args[1]) if len(args) > 1 else None
        except ValueError:
            raise Exception("invalid block number")
        self.fs.dump(start, end)

    def do_show(self, args: t.List[str]) -> None:
        # fmt: off
        """
SHOW            Displays the mounted image

  SYNTAX
        SHOW

        """
        # fmt: on
        sys.stdout.write(f"{self.fs}\n")
        sys.stdout.write(f"v6fs {__version__}\n")

    def do_help(self, args: t.List[str]) -> None:  # type: ignore
        # fmt: off
        """
HELP            Displays commands help

  SYNTAX
        HELP [topic]

        """
        # fmt: on
        if args and args[0] != "*":
            arg = args[0].lower()
            doc = getattr(getattr(self, f"do_{arg}", None), "__doc__", None)
            if doc:
                sys.stdout.write(f"{doc}\n")
            else:
                sys.stdout.write("%s\n" % str(self.nohelp % (arg,)))
        else:
            for name in sorted(x for x in self.get_names() if x.startswith("do_")):
                doc = getattr(self, name).__doc__
                if doc:
                    sys.stdout.write(doc.split("\n")[1])
                    sys.stdout.write("\n")

    def do_exit(self, args: t.List[str]) -> None:
        # fmt: off
        """
EXIT            Exit the shell

  SYNTAX
        EXIT
        """
        # fmt: on
        raise SystemExit

    def do_quit(self, args: t.List[str]) -> None:
        raise SystemExit

    def do_EOF(self, args: t.List[str]) -> bool:
        sys.stdout.write("\n")
        return True


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "-c",
        action="append",
        metavar="command",
        help="execute a single command",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        default=False,
        help="force opening an interactive shell even if commands are provided",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="display verbose output",
    )
    parser.add_argument(
        "--layout",
        choices=sorted(LAYOUTS.keys()),
        default=BIG_ENDIAN_LAYOUT.name,
        help="on-disk byte order and mode flags (default: %(default)s)",
    )
    parser.add_argument(
        "--indirect",
        action="store_true",
        default=False,
        help="read large directories through their indirect blocks",
    )
    parser.add_argument(
        "image",
        nargs="?",
        default=DEFAULT_IMAGE,
        help="disk image (default: %(default)s)",
    )
    options = parser.parse_args()
    try:
        image = RawImage.from_file(options.image, LAYOUTS[options.layout])
        fs = V6Filesystem.mount(image, follow_indirect=options.indirect)
    except OSError as ex:
        sys.stdout.write(f"error on read disk image: {ex}\n")
        if options.verbose:
            traceback.print_exc()
        sys.exit(1)
    shell = Shell(fs, verbose=options.verbose)
    # Execute the commands
    if options.c:
        try:
            for command in options.c:
                shell.onecmd(command, batch=True)
        except Exception:
            pass
    # Start interactive shell
    if options.interactive or not options.c:
        shell.cmdloop()

import argparse
import logging

from commands import (
    init, add, commit, log, status, config,
    branch, checkout, diff, merge, reset
)


def build_parser():
    # The main parser
    parser = argparse.ArgumentParser(prog="mini-vcs", description="mini-vcs: a minimal local version control system.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug traces of object, ref and index writes.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    # Command: init
    init_parser = subparsers.add_parser("init", help="Initialize a new, empty repository.")
    init_parser.add_argument("directory", nargs="?", help="Directory to initialize (defaults to the current one).")
    init_parser.add_argument("-b", "--initial-branch", default="master", help="Name of the first branch.")
    init_parser.set_defaults(func=init.run)

    # Command: add
    add_parser = subparsers.add_parser("add", help="Add file contents to the index.")
    add_parser.add_argument("files", nargs="+", help="Files to add.")
    add_parser.set_defaults(func=add.run)

    # Command: commit
    commit_parser = subparsers.add_parser("commit", help="Record changes to the repository.")
    commit_parser.add_argument("-m", "--message", required=True, help="Commit message.")
    commit_parser.set_defaults(func=commit.run)

    # Command: log
    log_parser = subparsers.add_parser("log", help="Show commit logs.")
    log_parser.set_defaults(func=log.run)

    # Command: status
    status_parser = subparsers.add_parser("status", help="Show the working tree status.")
    status_parser.set_defaults(func=status.run)

    # Command: config
    config_parser = subparsers.add_parser("config", help="Set a configuration value (e.g. core.compression).")
    config_parser.add_argument("key", help="The configuration key (section.option).")
    config_parser.add_argument("value", help="The configuration value.")
    config_parser.set_defaults(func=config.run)

    # Command: branch
    branch_parser = subparsers.add_parser("branch", help="List or create branches.")
    branch_parser.add_argument("name", nargs="?", help="The name of the branch to create.")
    branch_parser.set_defaults(func=branch.run)

    # Command: checkout
    checkout_parser = subparsers.add_parser("checkout", help="Restore a commit or switch branches.")
    checkout_parser.add_argument("target", help="A branch name, a commit id or a unique commit id prefix.")
    checkout_parser.set_defaults(func=checkout.run)

    # Command: diff
    diff_parser = subparsers.add_parser("diff", help="Show changes between HEAD and the working tree.")
    diff_parser.set_defaults(func=diff.run)

    # Command: merge
    merge_parser = subparsers.add_parser("merge", help="Merge a branch into the current branch.")
    merge_parser.add_argument("branch", help="The branch to merge.")
    merge_parser.set_defaults(func=merge.run)

    # Command: reset
    reset_parser = subparsers.add_parser("reset", help="Unstage files.")
    reset_parser.add_argument("files", nargs="+", help="Files to unstage from the index.")
    reset_parser.set_defaults(func=reset.run)

    return parser


# The main entry point for mini-vcs
def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # If a command was specified, run its function
    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

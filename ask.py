#!/usr/bin/env python3

# Copyright (c) 2026 rawprompt contributors
# SPDX-License-Identifier: ISC

"""
Asks a question in the terminal and prints the answer, for use from shell
scripts.

Sample usage:

  $ ask text "Project name?" --default demo --required
  $ ask password "Token?"
  $ ask confirm "Deploy now?" --default no
  $ ask select "Environment?" staging production

The answer is printed on stdout once the prompt is submitted. confirm prints
'yes' or 'no'. Pressing Ctrl-C cancels the prompt and exits with status 1.

Colors can be customized through the RAWPROMPT_STYLE environment variable,
see the prompts module.
"""

import argparse
import sys

import prompts


def main(argv=None):
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawDescriptionHelpFormatter, description=__doc__
    )
    subparsers = parser.add_subparsers(dest="kind", metavar="KIND")
    subparsers.required = True

    text_parser = subparsers.add_parser("text", help="Ask for a line of text")
    text_parser.add_argument("label", metavar="LABEL", help="Question to ask")
    text_parser.add_argument("--default", default="", help="Initial value")
    text_parser.add_argument(
        "--placeholder", default="", help="Text shown while the input is empty"
    )
    text_parser.add_argument(
        "--required", action="store_true", help="Refuse an empty answer"
    )
    text_parser.add_argument("--hint", default="", help="Help text below the input")

    password_parser = subparsers.add_parser(
        "password", help="Ask for a secret, masking the input"
    )
    password_parser.add_argument("label", metavar="LABEL", help="Question to ask")
    password_parser.add_argument(
        "--required", action="store_true", help="Refuse an empty answer"
    )
    password_parser.add_argument(
        "--hint", default="", help="Help text below the input"
    )

    confirm_parser = subparsers.add_parser("confirm", help="Ask a yes/no question")
    confirm_parser.add_argument("label", metavar="LABEL", help="Question to ask")
    confirm_parser.add_argument(
        "--default",
        choices=("yes", "no"),
        default="yes",
        help="Answer selected initially (default: yes)",
    )
    confirm_parser.add_argument("--hint", default="", help="Help text below the input")

    select_parser = subparsers.add_parser("select", help="Ask for one of OPTIONs")
    select_parser.add_argument("label", metavar="LABEL", help="Question to ask")
    select_parser.add_argument(
        "options", metavar="OPTION", nargs="+", help="An option to choose from"
    )
    select_parser.add_argument(
        "--default", help="Option selected initially (default: the first one)"
    )
    select_parser.add_argument(
        "--scroll", type=int, default=5, help="Options visible at once (default: 5)"
    )
    select_parser.add_argument("--hint", default="", help="Help text below the input")

    args = parser.parse_args(argv)

    try:
        if args.kind == "text":
            answer = prompts.text(
                args.label,
                default=args.default,
                placeholder=args.placeholder,
                required=args.required,
                hint=args.hint,
            )
        elif args.kind == "password":
            answer = prompts.password(
                args.label, required=args.required, hint=args.hint
            )
        elif args.kind == "confirm":
            answer = prompts.confirm(
                args.label, default=args.default == "yes", hint=args.hint
            )
            answer = "yes" if answer else "no"
        else:
            if args.default is not None and args.default not in args.options:
                sys.exit(f"error: default '{args.default}' is not one of the options")
            if args.scroll < 1:
                sys.exit("error: --scroll must be at least 1")
            answer = prompts.select(
                args.label,
                args.options,
                default=args.default,
                scroll=args.scroll,
                hint=args.hint,
            )
    except RuntimeError as e:
        # Not a terminal
        sys.exit(f"error: {e}")

    print(answer)


if __name__ == "__main__":
    main()

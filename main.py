"""
Entry point for the WordPress article syndication tool.

Usage::

    python main.py [options] <url>
    python main.py -l posts.list
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from syndicator.config import load_config
from syndicator.context import RunContext
from syndicator.syndication_tool import WordPressSyndicationTool, read_url_list
from syndicator.utils.errors import ConfigError, error_message
from syndicator.utils.reports import RunLog

DEFAULT_LIST_FILE = "posts.list"
DEFAULT_CONFIG_FILE = "wp-login.config"

EXAMPLES = """\
Examples:
  python main.py https://example.com/post-url
  python main.py -l posts.list
  python main.py -c wp-custom.config https://example.com/post-url
  python main.py --verbose -l urls.txt
"""


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wp-syndicate",
        description="WordPress Post Copier: copy articles from another site into WordPress as drafts.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("url", nargs="?", default=None, help="Source article URL to copy")
    p.add_argument("-l", "--list", default=DEFAULT_LIST_FILE, help="File with one URL per line to process")
    p.add_argument("-c", "--config", default=DEFAULT_CONFIG_FILE, help="Key-value config file with WordPress credentials")
    p.add_argument("-v", "--verbose", action="store_true", help="Echo diagnostic detail to the console")
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.url is not None and not args.url.startswith("http"):
        parser.error(f'Unknown argument "{args.url}".')
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    ctx = RunContext(verbose=args.verbose, log=RunLog("."))

    ctx.log_verbose(f"Loading config from: {args.config}")
    try:
        config = load_config(args.config)
    except ConfigError as e:
        ctx.log_error(error_message("CONFIG", str(e)))
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    ctx.log_verbose("Config loaded successfully (Non-sensitive info only).")
    ctx.log_verbose(f"Site URL: {config.site_url}")
    ctx.log_verbose(f"Author ID: {config.author_id}")
    ctx.log_verbose(f"Category ID: {config.category_id}")

    tool = WordPressSyndicationTool(config, ctx=ctx)
    if args.url:
        tool.syndicate_post(args.url)
    elif os.path.exists(args.list):
        urls = read_url_list(args.list)
        ctx.log_verbose(f"Processing {len(urls)} URLs from {args.list}")
        tool.syndicate_batch(urls)
    else:
        message = "No URL or list file provided. Exiting..."
        ctx.log_error(message)
        print(f"[ERROR] {message}", file=sys.stderr)
        return 1

    created = tool.finish()
    print(f"Total posts created: {created}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

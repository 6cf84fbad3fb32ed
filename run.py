#!/usr/bin/env python3
"""
Public Content API Client — Entry Point.

A small command line front end over PublicContentApi, useful for checking a
content service endpoint and inspecting what it returns. Configuration comes
from a .env file (see pca_client/settings.py); every command prints JSON.

Commands:
  parse-uri <uri>                     Parse a CM URI offline (no endpoint needed)
  publication <ns> <pubId>            Fetch one publication
  mapping <ns> <url>                  Find the publication serving a site URL
  page-model <ns> <pubId> <url>       Fetch the raw page model of a page
  sitemap <ns> <pubId> [--levels N]   Fetch the sitemap N levels deep

Usage:
    python run.py parse-uri tcm:5-456-64
    python run.py mapping tcm /home
    python run.py sitemap sites 5 --levels 3 --debug
    python run.py --env /path/.env publication tcm 5
    python run.py --version
"""

import argparse
import json
import logging
import sys

from pydantic import BaseModel

from pca_client import __version__
from pca_client.client import PublicContentApi
from pca_client.cm_uri import CmUri
from pca_client.exceptions import PcaClientError
from pca_client.settings import load_settings


def _to_json(value) -> str:
    if isinstance(value, BaseModel):
        value = value.model_dump(serialize_as_any=True)
    return json.dumps(value, indent=2, default=str)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Public Content API client - query a content delivery GraphQL endpoint"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

    commands = parser.add_subparsers(dest="command")

    parse_uri = commands.add_parser("parse-uri", help="Parse a CM URI")
    parse_uri.add_argument("uri")

    publication = commands.add_parser("publication", help="Fetch a publication")
    publication.add_argument("ns", help="Namespace token or name (tcm, ish, sites, docs)")
    publication.add_argument("publication_id", type=int)

    mapping = commands.add_parser("mapping", help="Find the publication for a site URL")
    mapping.add_argument("ns")
    mapping.add_argument("url")

    page_model = commands.add_parser("page-model", help="Fetch the raw page model")
    page_model.add_argument("ns")
    page_model.add_argument("publication_id", type=int)
    page_model.add_argument("url")

    sitemap = commands.add_parser("sitemap", help="Fetch the sitemap")
    sitemap.add_argument("ns")
    sitemap.add_argument("publication_id", type=int)
    sitemap.add_argument("--levels", type=int, default=1, help="Descendant levels to fetch (default: 1)")

    return parser


def _run_command(args, api: PublicContentApi):
    if args.command == "publication":
        return api.get_publication(args.ns, args.publication_id)
    if args.command == "mapping":
        return api.get_publication_mapping(args.ns, args.url)
    if args.command == "page-model":
        return api.get_page_model_data(args.ns, args.publication_id, args.url)
    if args.command == "sitemap":
        return api.get_sitemap(args.ns, args.publication_id, args.levels)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None):
    """Parse CLI arguments and run one command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"pca-client {__version__}")
        sys.exit(0)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Parsing a URI needs no endpoint
    if args.command == "parse-uri":
        try:
            uri = CmUri.parse(args.uri)
        except PcaClientError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            sys.exit(1)
        print(_to_json({
            "namespace": uri.namespace.token,
            "namespaceId": uri.namespace_id,
            "publicationId": uri.publication_id,
            "itemId": uri.item_id,
            "itemType": int(uri.item_type),
            "version": uri.version,
            "uri": str(uri),
        }))
        return

    try:
        settings = load_settings(args.env)
    except PcaClientError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    # Apply CLI overrides on top of .env values
    if args.debug:
        settings.debug = True

    errors = settings.validate()
    if errors:
        print("Configuration errors:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        sys.exit(1)

    api = PublicContentApi.from_settings(settings)
    try:
        result = _run_command(args, api)
    except PcaClientError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        if e.__cause__ is not None:
            print(f"  caused by: {e.__cause__}", file=sys.stderr)
        sys.exit(1)
    finally:
        api.client.close()

    print(_to_json(result))


if __name__ == "__main__":
    main()

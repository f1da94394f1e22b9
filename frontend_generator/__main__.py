"""Entry point: python -m frontend_generator SOURCE

Reads an OpenAPI document (file or URL) and writes <name>-types.d.ts plus
<name>.ts, or <name>.mjs for --language js.
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path

import httpx

from .codegen import generate, write_client
from .context_builder import MissingPathParameterError
from .dialects import DIALECTS
from .loader import SpecLoadError, load_spec

DEFAULT_NAME = "api"
DEFAULT_OUTPUT_DIR = Path(".")

EXIT_SUCCESS = 0
EXIT_SOURCE_NOT_FOUND = 1
EXIT_INVALID_DOCUMENT = 2
EXIT_GENERATION_ERROR = 3


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="frontend-openapi-generator",
        description="Generate a fetch-based frontend client from an OpenAPI document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s openapi.json
  %(prog)s openapi.yaml --name movies --language js --types
  %(prog)s https://example.com/openapi.json --full-response -o src/client
        """,
    )
    parser.add_argument("source", help="Path or http(s) URL of the OpenAPI document")
    parser.add_argument(
        "--name", "-n",
        default=DEFAULT_NAME,
        help="Base name of the generated files and client type (default: %(default)s)",
    )
    parser.add_argument(
        "--language", "-l",
        choices=sorted(DIALECTS),
        default="ts",
        help="Output dialect (default: %(default)s)",
    )
    parser.add_argument(
        "--full-response",
        action="store_true",
        help="Return {statusCode, headers, body} from every call",
    )
    parser.add_argument(
        "--types",
        action="store_true",
        help="Also write <name>-types.d.ts for the js dialect",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when a path placeholder has no matching path parameter",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        dest="output_dir",
        help="Output directory (default: current directory)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    parsed = parse_args(args)
    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        spec = load_spec(parsed.source)
        client = generate(
            spec,
            name=parsed.name,
            language=parsed.language,
            full_response=parsed.full_response,
            include_types=True if parsed.types else None,
            strict=parsed.strict,
        )
        written = write_client(client, parsed.output_dir, parsed.name)
    except FileNotFoundError:
        print(f"Error: OpenAPI document not found: {parsed.source}", file=sys.stderr)
        return EXIT_SOURCE_NOT_FOUND
    except httpx.HTTPError as e:
        print(f"Error: Cannot fetch {parsed.source}: {e}", file=sys.stderr)
        return EXIT_SOURCE_NOT_FOUND
    except SpecLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_DOCUMENT
    except MissingPathParameterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_GENERATION_ERROR
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if parsed.verbose:
            traceback.print_exc()
        return EXIT_GENERATION_ERROR

    for path in written:
        print(f"Generated {path}")
    print(f"{client.operation_count} operations ({parsed.language})")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())

"""``wren routes`` — list registered routes.

Resolves an import string to a wren App and prints the route table
with method, path template, success status, and handler parameters.
"""

import argparse
import sys

from wren.binding.params import ParameterSpec, Source
from wren.cli._resolve import resolve_app


def _format_param(spec: ParameterSpec) -> str:
    type_name = getattr(spec.target_type, "__name__", str(spec.target_type))
    prefix = "{" if spec.source is Source.PATH else ""
    suffix = "}" if spec.source is Source.PATH else ""
    optional = "" if spec.required else "?"
    return f"{prefix}{spec.name}{suffix}{optional}: {type_name}"


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a wren app.

    Resolves ``args.app`` to an App instance and prints a table of
    METHOD, PATH, STATUS, and HANDLER in registration order.
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = app.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str, str]] = []
    for route in routes:
        descriptor = route.handler
        params = ", ".join(_format_param(p) for p in descriptor.parameters)
        rows.append(
            (
                route.method,
                route.pattern.raw,
                str(descriptor.success_status),
                f"{descriptor.name}({params})",
            )
        )

    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{:<6}}  {{}}"
    print(fmt.format("METHOD", "PATH", "STATUS", "HANDLER"))
    sep_len = max_method + max_path + 12 + max(len(r[3]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))

"""``wren routes`` — list services, aliases, and regex routes.

Freezes the app (so filesystem services are discovered) and prints
three tables.
"""

import argparse

from wren.cli._resolve import resolve_app_or_exit


def _print_table(headers: tuple[str, ...], rows: list[tuple[str, ...]]) -> None:
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row, strict=True)]

    fmt = "  ".join(f"{{:<{w}}}" for w in widths)
    print(fmt.format(*headers).rstrip())
    print("-" * min(sum(widths) + 2 * (len(widths) - 1), 80))
    for row in rows:
        print(fmt.format(*row).rstrip())


def run_routes(args: argparse.Namespace) -> None:
    """Print the services, aliases, and regex routes of ``args.app``."""
    app = resolve_app_or_exit(args)
    registry = app.registry
    aliases = app.coordinator.aliases

    service_rows: list[tuple[str, ...]] = []
    for descriptor in sorted(registry, key=lambda d: d.name):
        methods = "main (only)" if descriptor.main_only else ", ".join(sorted(descriptor.methods))
        service_rows.append((descriptor.name, descriptor.protocol or "-", methods))
    _print_table(("SERVICE", "PROTOCOL", "METHODS"), service_rows)

    if aliases.aliases:
        print()
        alias_rows: list[tuple[str, ...]] = []
        for key, entry in sorted(aliases.aliases.items()):
            method_map = ", ".join(f"{k}->{v}" for k, v in sorted(entry.methods.items()))
            alias_rows.append((key, entry.target, entry.method or "-", method_map or "-"))
        _print_table(("ALIAS", "TARGET", "METHOD", "METHOD MAP"), alias_rows)

    if aliases.has_regex_routes:
        print()
        regex_rows: list[tuple[str, ...]] = []
        for index, route in enumerate(aliases.regex_routes):
            pattern = route.pattern.pattern if route.pattern is not None else "(missing)"
            regex_rows.append((str(index), pattern, route.target, route.method or "(missing)"))
        _print_table(("#", "PATTERN", "TARGET", "METHOD"), regex_rows)

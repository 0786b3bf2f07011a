"""Site — services discovered from ``app/service``.

Demonstrates convention dispatch (``/user-profile/edit-name/42``), an alias
with a method map (``/me/name/42``), a regex route (``/items/7``), a rest
service, and a custom fail page under ``app/service/default``.

Run:
    cd examples/site && python app.py
"""

from pathlib import Path

from wren import App, AppConfig

SERVICES = Path(__file__).parent / "app" / "service"


def _trim(service, method, arguments):
    return tuple(arg.strip() if isinstance(arg, str) else arg for arg in arguments)


app = App(
    AppConfig(
        services_dir=SERVICES,
        routes={
            "me": {0: "user-profile", "methods": {"name": "edit-name"}, "methodFilter": _trim},
            "~~": [{0: "item", "pattern": r"^/items/(\d+)$", "method": "get"}],
        },
    )
)

if __name__ == "__main__":
    app.run()

"""famfin: family finance tracking with a CLI and a REST API."""

__version__ = "0.1.0"


# Entry points are resolved lazily so importing famfin stays cheap
def __getattr__(name):
    if name == "main":
        from famfin.cli.main import main
        return main
    if name == "create_application":
        from famfin.api.app import create_application
        return create_application
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

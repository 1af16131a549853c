from rich.pretty import pprint

from schemacli import *


@command
def search(
        query=Cardinal(0, descr="search query"),
        /,
        limit=Option(float, short="l", default=5, descr="number of results"),
        *,
        verbose=Flag(short="v", descr="verbose output"),
):
    """Search with custom parameters"""
    pprint({"query": query, "limit": limit, "verbose": verbose})


@command
def run(
        script=Cardinal(0, descr="script to run"),
        /,
        args=Rest(descr="arguments passed to the script"),
        *,
        dry_run=Flag(descr="print instead of running"),
):
    """Run a script"""
    pprint({"script": script, "args": args, "dry_run": dry_run})


cli = CommandGroup({"search": search, "run": run}, name="demo", descr="schemacli demo", default="search")


if __name__ == '__main__':
    raise SystemExit(invoke(cli))

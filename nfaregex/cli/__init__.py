import typing


def source(inf: typing.Iterator[str], exit_first: bool) -> None:
    from . import main
    main.SourceCommand.do_source(inf, exit_first)

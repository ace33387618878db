import functools
import inspect

import typer

_TRACE_ALL = False


def set_monitoring(active: bool):
    """
    Turn tracing on (or off) for every monitored function, regardless of the
    flag it was decorated with.
    """
    global _TRACE_ALL
    _TRACE_ALL = active


def echo(message: str = "", bold: bool = False):
    typer.echo(typer.style(message, fg=typer.colors.GREEN, bold=bold))


def echo_error(message: str):
    typer.echo(typer.style(message, fg=typer.colors.RED, bold=True), err=True)


def echo_warning(message: str):
    typer.echo(typer.style(message, fg=typer.colors.YELLOW, bold=True))


def monitor(active: bool = True):
    """
    Return a decorator that print the info of the target function when is called.
    """

    def decorator(func):
        args_names = inspect.getfullargspec(func)[0][1:]

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not (active or _TRACE_ALL):
                return func(*args, **kwargs)

            values = list(zip(args_names, args[1:])) + list(kwargs.items())
            args_str = ", ".join(f"{name}={value}" for name, value in values)
            echo(f"{args[0]} call => {func.__name__} ({args_str})")
            return func(*args, **kwargs)

        return wrapper

    return decorator

"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from rich.console import Console
from rich.markup import escape

from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)

err_console = Console(stderr=True)


def _to_dict(item):
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    return item


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Clean JSON output on stdout with --json
    - Error messages on stderr, no tracebacks
    - Exit codes from exit_codes

    The wrapped command returns a result object (with to_dict) or None
    when it renders its own output.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        json_output = kwargs.get('json_output', False)

        try:
            result = func(*args, **kwargs)

            if json_output and result is not None:
                items = result if isinstance(result, (list, tuple)) else [result]
                for item in items:
                    print(json.dumps(_to_dict(item), ensure_ascii=False), flush=True)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            err_console.print("[red]Interrupted by user[/red]")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            if json_output:
                error_obj = e.to_dict() if hasattr(e, 'to_dict') else {
                    "error": str(e),
                    "type": type(e).__name__,
                    "exit_code": e.exit_code
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(e.exit_code)
        except Exception as e:
            err_console.print(f"[red]Command failed:[/red] {escape(str(e))}")
            if json_output:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


json_option = click.option('--json', 'json_output', is_flag=True, help='Output result as JSON')

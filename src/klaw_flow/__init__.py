"""klaw-flow: Option, Result and short-circuit sequencing for Python 3.13+.

Flat imports (preferred):
    from klaw_flow import Option, Some, Nothing, Result, Ok, Err, Flow
    from klaw_flow import do, result, safe

Submodule imports (for organization):
    from klaw_flow.option import Some, Nothing, Option
    from klaw_flow.result import Ok, Err, Result, UNIT
    from klaw_flow.engine import Step, OptionAdapter
    from klaw_flow.decorators import do, safe
"""

# Configuration & logging
from klaw_flow._config import FlowConfig, get_config, init
from klaw_flow._logging import add_log_hook, clear_log_hooks, configure_logging, get_logger, remove_log_hook

# Async
from klaw_flow.async_ import AsyncOption, AsyncResult

# Decorators
from klaw_flow.decorators import (
    do,
    do_async,
    result,
    safe,
    safe_async,
)

# Errors
from klaw_flow.errors import (
    AbsenceError,
    FlowError,
    Origin,
    UnwrapError,
    UnwrappedErrWithOk,
    UnwrappedNone,
    UnwrappedOkWithErr,
)

# Sequencing
from klaw_flow.flow import Flow
from klaw_flow.option import (
    Nothing,
    NothingType,
    Option,
    Some,
)
from klaw_flow.propagate import Propagate
from klaw_flow.result import (
    UNIT,
    UNIT_RESULT,
    Err,
    Ok,
    Result,
    UnitType,
)

__all__ = [
    'UNIT',
    'UNIT_RESULT',
    # Errors
    'AbsenceError',
    # Async
    'AsyncOption',
    'AsyncResult',
    # Result types
    'Err',
    # Sequencing
    'Flow',
    'FlowConfig',
    'FlowError',
    # Option types
    'Nothing',
    'NothingType',
    'Ok',
    'Option',
    'Origin',
    'Propagate',
    'Result',
    'Some',
    'UnitType',
    'UnwrapError',
    'UnwrappedErrWithOk',
    'UnwrappedNone',
    'UnwrappedOkWithErr',
    # Logging
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    # Decorators
    'do',
    'do_async',
    # Configuration
    'get_config',
    'get_logger',
    'init',
    'remove_log_hook',
    'result',
    'safe',
    'safe_async',
]

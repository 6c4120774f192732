# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Miscellaneous helper functions"""

import logging
import warnings


LOGGER = logging.getLogger("dcmpix")


def warn_and_log(
    msg: str, category: type = UserWarning, stacklevel: int = 1
) -> None:
    """Send warning message `msg` to the logger.

    Parameters
    ----------
    msg : str
        The warning message.
    category : type[Warning], optional
        The warning category class, defaults to ``UserWarning``.
    stacklevel : int, optional
        The stack level to refer to, relative to where `warn_and_log`
        is used.
    """
    LOGGER.warning(msg)
    warnings.warn(msg, category, stacklevel=stacklevel + 1)

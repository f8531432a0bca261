# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging helper for graph-mailer.

Handlers, level and format are configured once by the entry point
(see :func:`graph_mailer.cli.configure_logging`); library modules only ask
for a named logger.

Example::

    from graph_mailer.logger import get_logger

    logger = get_logger("MailSender")
    logger.info("Email sent successfully.")
"""

import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str = "GraphMailer") -> logging.Logger:
    """Return the stdlib logger bound to ``name``.

    Args:
        name: Logger name. Defaults to "GraphMailer".
    """
    return logging.getLogger(name)

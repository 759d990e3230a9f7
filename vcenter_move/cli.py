from __future__ import annotations

import argparse
import logging
from logging import Logger

from pyVmomi import vmodl

from vcenter_move.api_client import VCenterAPIClient
from vcenter_move.constants import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_NOT_FOUND,
    EXIT_OK,
)
from vcenter_move.exceptions import BaseVCenterException
from vcenter_move.flows import MoveResult, VCenterMoveFlow
from vcenter_move.resource_config import VCenterMoveConfig, WaitMode
from vcenter_move.utils.task_waiter import (
    VcenterPropertyWatchTaskWaiter,
    VcenterTaskWaiter,
)

logger = logging.getLogger("vcenter_move")


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vcenter-move",
        description="Moves a managed entity from its current location in the "
        "inventory to a new location, in a specified folder",
    )
    parser.add_argument("--url", required=True, help="url of the web service")
    parser.add_argument(
        "--username", required=True, help="username for the authentication"
    )
    parser.add_argument(
        "--password",
        help="password for the authentication, "
        "taken from VCENTER_PASSWORD or asked for if missing",
    )
    parser.add_argument(
        "--entityname",
        required=True,
        help="name of the inventory object - a managed entity",
    )
    parser.add_argument(
        "--foldername",
        required=True,
        help="name of folder to move inventory object into",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="seconds to wait for the move task, waits without a limit by default",
    )
    parser.add_argument(
        "--wait-mode",
        choices=WaitMode.ALL,
        default=WaitMode.WATCH,
        help="watch the task for property updates or poll its state",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=VcenterTaskWaiter.DEFAULT_WAIT_TIME,
        help="seconds between task checks",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="don't verify the vCenter certificate",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="exit with an error status if the entity or folder is not found",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="more information displayed"
    )
    return parser


def get_task_waiter(
    conf: VCenterMoveConfig,
    vcenter_client: VCenterAPIClient,
    logger: Logger,
) -> VcenterTaskWaiter:
    if conf.wait_mode == WaitMode.POLL:
        return VcenterTaskWaiter(
            logger,
            timeout=conf.timeout,
            wait_time=conf.poll_interval,
        )
    return VcenterPropertyWatchTaskWaiter(
        logger,
        vcenter_client.property_collector,
        timeout=conf.timeout,
        wait_time=conf.poll_interval,
    )


def run(conf: VCenterMoveConfig, logger: Logger) -> int:
    with VCenterAPIClient.from_config(conf, logger) as vcenter_client:
        task_waiter = get_task_waiter(conf, vcenter_client, logger)
        flow = VCenterMoveFlow(vcenter_client, task_waiter, logger)
        result = flow.move(conf.entity_name, conf.folder_name)

    if result is MoveResult.MOVED:
        return EXIT_OK
    if result is MoveResult.NOT_FOUND:
        return EXIT_NOT_FOUND if conf.strict else EXIT_OK
    return EXIT_FAILURE


def main(argv=None) -> int:
    args = get_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        conf = VCenterMoveConfig.from_args(args)
        return run(conf, logger)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED
    except BaseVCenterException as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except vmodl.MethodFault as e:
        logger.exception(f"vCenter fault: {e.msg}")
        return EXIT_FAILURE

#!/usr/bin/env python3
"""
armsteer Core Demo - Simple example application.

Runs the full engine against a scripted mock sensor and logs every
command change.
"""

import asyncio
import logging
import sys

from core.types import (
    DecoderConfig,
    MovementCommand,
    ResolverConfig,
    SessionSnapshot,
    SupervisorConfig,
    SupervisorState,
)
from core.decoder import OrientationDecoder
from core.resolver import CommandResolver
from core.render import render_command, render_session
from core.session import ArmSession
from core.supervisor import Supervisor
from core.output import MockSink
from sensor import MockSensor, TestScripts


logger = logging.getLogger(__name__)


async def run_demo(script: str = "sweep", ticks: int = 40) -> MockSink:
    """
    Run the engine against a mock sensor.

    Args:
        script: TestScripts name to play
        ticks: Number of poll ticks to let it run

    Returns:
        The sink, holding every emitted command
    """
    logger.info("=" * 60)
    logger.info("armsteer Core Demo")
    logger.info("=" * 60)

    device = MockSensor()
    device.load_script(script)

    decoder = OrientationDecoder(DecoderConfig(resolution=18))
    session = ArmSession(decoder, device=device)
    resolver = CommandResolver(ResolverConfig(resolution=18))
    sink = MockSink()

    supervisor_config = SupervisorConfig(
        loop_interval=0.05,
        connect_timeout=1.0,
        orientation_timeout=1.0,
    )
    supervisor = Supervisor(
        device=device,
        session=session,
        resolver=resolver,
        sink=sink,
        config=supervisor_config,
    )

    def on_state_change(old_state: SupervisorState, new_state: SupervisorState):
        logger.info(f"STATE CHANGE: {old_state.value} -> {new_state.value}")

    last_label = [None]

    def on_command(command: MovementCommand, snapshot: SessionSnapshot):
        label = render_command(command)
        if label != last_label[0]:
            last_label[0] = label
            logger.info(f"{render_session(snapshot, decoder.resolution)} -> {label or '(idle)'}")

    supervisor.add_state_callback(on_state_change)
    supervisor.add_command_callback(on_command)

    supervisor_task = asyncio.create_task(supervisor.run())
    supervisor.request_connect()

    await asyncio.sleep(ticks * supervisor_config.loop_interval)

    supervisor.request_disconnect()
    await asyncio.sleep(supervisor_config.loop_interval * 2)
    supervisor.stop()
    await supervisor_task

    logger.info(f"Demo finished: {sink.emit_count} commands emitted")
    return sink


def main(script: str = "sweep"):
    """Main entry point"""
    try:
        asyncio.run(run_demo(script))
    except KeyboardInterrupt:
        logger.info("\nDemo interrupted by user")
    except Exception as e:
        logger.error(f"Demo failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    main()

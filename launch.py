#!/usr/bin/env python3
"""
armsteer Launcher - Steer a remote device with a motion-sensing armband

Usage:
    python launch.py --gamepad            # Gamepad emulating the armband
    python launch.py --mock               # Scripted mock sensor
    python launch.py --mock --script sweep
    python launch.py --demo               # Run core demo
"""

import sys
import argparse
import asyncio
import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure logging"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )


def build_supervisor(device, config, show_status: bool = False):
    """Wire decoder, session, resolver and console sink around a sensor"""
    from core.decoder import OrientationDecoder
    from core.resolver import CommandResolver
    from core.render import render_session
    from core.session import ArmSession
    from core.supervisor import Supervisor
    from core.output import ConsoleSink

    decoder = OrientationDecoder(config.decoder_config())
    session = ArmSession(decoder, device=device)
    resolver = CommandResolver(config.resolver_config())

    status = None
    if show_status:
        status = lambda: render_session(session.snapshot(), decoder.resolution)
    sink = ConsoleSink(status=status)

    supervisor = Supervisor(
        device=device,
        session=session,
        resolver=resolver,
        sink=sink,
        config=config.supervisor_config(),
    )
    if show_status:
        # Keep the bars moving while the band is off the arm
        supervisor.add_idle_callback(lambda snapshot: sink.refresh())
    return supervisor


def launch_sensor(device, config, show_status: bool = False) -> None:
    """Run the control loop until Ctrl+C"""
    from core.supervisor import ConnectionFailed

    supervisor = build_supervisor(device, config, show_status)

    async def run():
        supervisor_task = asyncio.create_task(supervisor.run())
        print("Connecting with sensor...")
        supervisor.request_connect()
        await supervisor_task

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\nShutting down...")
    except ConnectionFailed as e:
        print(f"Error: {e}")
        sys.exit(1)


def launch_gamepad(config, show_status: bool = False) -> None:
    """Launch with a gamepad emulating the armband"""
    from sensor import GamepadSensor, HAS_PYGAME

    if not HAS_PYGAME:
        print("\nERROR: pygame not installed")
        print("Install with: pip install pygame")
        sys.exit(1)

    print("Press Start to put the band on, A for forward, B for reverse")
    launch_sensor(GamepadSensor(), config, show_status)


def launch_mock(config, script: str, show_status: bool = False) -> None:
    """Launch with the scripted mock sensor"""
    from sensor import MockSensor

    device = MockSensor()
    device.load_script(script)
    print(f"Using MOCK sensor (script '{script}')")
    launch_sensor(device, config, show_status)


def launch_demo(script: str) -> None:
    """Launch core architecture demo"""
    print("Starting core architecture demo...")
    from demo_core import main
    main(script)


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="armsteer - Armband Steering Control",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python launch.py --gamepad --status   Gamepad with bar graph readout
  python launch.py --mock --script forward
  python launch.py --demo               Run core demo
        """
    )

    parser.add_argument(
        "--gamepad",
        action="store_true",
        help="Use a gamepad as the sensor (requires pygame)"
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the scripted mock sensor (no hardware needed)"
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run core architecture demo"
    )
    parser.add_argument(
        "--script",
        default="sweep",
        choices=["forward", "turn_left_reverse", "sweep", "arm_lost"],
        help="Mock sensor script"
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show the roll/pitch/yaw bar graph next to the command"
    )
    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level"
    )

    args = parser.parse_args()

    setup_logging(args.log_level)

    from armsteer_config import ArmsteerConfig

    config = ArmsteerConfig(args.env_file)
    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            print(f"Config error: {error}")
        sys.exit(1)

    if args.demo:
        launch_demo(args.script)
    elif args.gamepad:
        launch_gamepad(config, args.status)
    elif args.mock:
        launch_mock(config, args.script, args.status)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

"""Main entry point for the Spatializer Panel.

Builds the session from configuration and command-line flags, then runs
either the pygame panel or a headless loop that only performs the
start-up broadcast.
"""

import argparse
import logging
import signal
import sys
import time
from typing import Optional

from . import config
from .layouts import LayoutStore
from .meters import MeterLevels, MeterReceiver
from .mixer import Fader, SoloBank
from .osc_sender import MockOscSender, OscSender
from .registry import ObjectRegistry
from .session import SpatializerSession
from .zones import ZoneCatalog, load_zones

logger = logging.getLogger("spatializer")


class SpatializerApp:
    """Main application class for the Spatializer Panel.

    Owns the OSC sender, the session, the mixer controls and (optionally)
    the meter receiver, and drives them from one frame loop.
    """

    def __init__(
        self,
        zones: ZoneCatalog,
        objects: int = config.OBJECT_COUNT,
        radius: float = config.DRAG_RADIUS,
        host: str = config.OSC_HOST,
        port: int = config.OSC_PORT,
        mock_osc: bool = False,
        meter_port: Optional[int] = None,
        layout_dir: str = config.LAYOUT_DIR,
        verbose: bool = True,
    ):
        """Initialize the application.

        Args:
            zones: Snap zones
            objects: Number of tracked objects
            radius: Drag radius in world units
            host: OSC target host
            port: OSC target port
            mock_osc: If True, log messages instead of sending them
            meter_port: Port for incoming meter levels, None to disable
            layout_dir: Directory of saved layouts
            verbose: If True, print status messages
        """
        self.verbose = verbose
        self.running = False

        self.osc: OscSender = MockOscSender(host=host, port=port, verbose=verbose) if mock_osc else OscSender(host, port)
        self.session = SpatializerSession(
            ObjectRegistry.evenly_spaced(objects, radius),
            self.osc,
            zones=zones,
            radius=radius,
        )
        self.solo = SoloBank(self.osc, config.CHANNEL_COUNT)
        self.master = Fader(self.osc, config.OSC_MASTER_FADER, config.MASTER_FADER_DEFAULT)
        self.reverb = Fader(self.osc, config.OSC_REVERB_FADER, config.REVERB_FADER_DEFAULT)
        self.layouts = LayoutStore(layout_dir)

        self.meters = MeterLevels(config.CHANNEL_COUNT)
        self.receiver = MeterReceiver(self.meters, port=meter_port) if meter_port else None

    def start(self) -> None:
        """Open connections and start the session."""
        self.osc.open()
        self.master.sync()
        self.reverb.sync()
        if self.receiver:
            self.receiver.start()
        self.session.start()
        self.running = True

        if self.verbose:
            print(f"✓ OSC: Targeting {self.osc.host}:{self.osc.port}")
            print(f"✓ Objects: {len(self.session.registry)} on radius {self.session.radius}")
            print(f"✓ Zones: {', '.join(f'{z:g}' for z in self.session.zones.zones) or '(none)'}")
            print(f"✓ Faders: master {self.master.display}, reverb {self.reverb.display}")
            if self.receiver:
                print(f"✓ Meters: listening on port {self.receiver.port}")

    def stop(self) -> None:
        """Stop the session and release all resources."""
        self.running = False
        self.session.close()
        if self.receiver:
            self.receiver.stop()
        self.osc.close()
        if self.verbose:
            print("\n✓ Spatializer Panel has stopped.")

    def load_layout(self, name: str) -> bool:
        """Load a saved layout into the session."""
        try:
            layout = self.layouts.load(name)
        except ValueError as exc:
            logger.warning("%s", exc)
            return False
        return self.session.apply_layout(layout)

    def save_layout(self, name: str) -> bool:
        """Save the current object positions and labels under a name."""
        return self.layouts.save(self.session.capture_layout(name)) is not None

    def delete_layout(self, name: str) -> bool:
        """Delete a saved layout."""
        return self.layouts.delete(name)

    def run_headless(self) -> None:
        """Start, wait for the start-up broadcast, then stop."""
        self.start()
        try:
            while self.running and self.session.broadcaster.startup_pending:
                self.session.tick()
                time.sleep(0.01)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()

    def run(self, layout_name: str = config.DEFAULT_LAYOUT_NAME) -> None:
        """Run the panel window until it is closed.

        Args:
            layout_name: Name the W key saves the current layout under
        """
        from .panel import Panel

        panel = Panel(
            self.session,
            solo=self.solo,
            master=self.master,
            reverb=self.reverb,
            meters=self.meters,
            layouts=self.layouts,
            layout_name=layout_name,
        )
        self.start()
        panel.start()
        try:
            while self.running and panel.running:
                panel.clock.tick(config.FPS)
                if not panel.handle_events():
                    break
                self.session.tick(panel.pointer())
                panel.render()
        except KeyboardInterrupt:
            pass
        finally:
            panel.stop()
            self.stop()


def configure_logging(quiet: bool = False, debug: bool = False) -> None:
    """Set up root logging for the CLI."""
    level = logging.DEBUG if debug else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the Spatializer Panel CLI."""
    parser = argparse.ArgumentParser(
        description="Spatializer Panel - circular source positioning over OSC"
    )
    parser.add_argument(
        "--host",
        default=config.OSC_HOST,
        help=f"OSC target host (default: {config.OSC_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.OSC_PORT,
        help=f"OSC target port (default: {config.OSC_PORT})",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Log OSC messages instead of sending them",
    )
    parser.add_argument(
        "--objects",
        type=int,
        default=config.OBJECT_COUNT,
        help=f"Number of tracked objects (default: {config.OBJECT_COUNT})",
    )
    parser.add_argument(
        "--radius",
        type=float,
        default=config.DRAG_RADIUS,
        help=f"Drag radius in world units (default: {config.DRAG_RADIUS})",
    )
    parser.add_argument(
        "--zones",
        metavar="FILE",
        help="JSON file with the list of snap bearings",
    )
    parser.add_argument(
        "--meter-port",
        type=int,
        default=None,
        help=f"Listen for /channelIn levels on this port (e.g. {config.METER_PORT})",
    )
    parser.add_argument(
        "--layout-dir",
        default=config.LAYOUT_DIR,
        help=f"Directory of saved layouts (default: {config.LAYOUT_DIR})",
    )
    parser.add_argument(
        "--load",
        metavar="NAME",
        help="Apply a saved layout at start-up",
    )
    parser.add_argument(
        "--save",
        metavar="NAME",
        help="Save the final layout under this name on exit",
    )
    parser.add_argument(
        "--list-layouts",
        action="store_true",
        help="List saved layouts and exit",
    )
    parser.add_argument(
        "--delete",
        metavar="NAME",
        help="Delete a saved layout and exit",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="No window: send the start-up broadcast and exit",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce output verbosity",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every message sent",
    )

    args = parser.parse_args(argv)
    configure_logging(quiet=args.quiet, debug=args.debug)

    if args.objects < 0 or args.radius <= 0:
        parser.error("--objects must be >= 0 and --radius must be > 0")

    try:
        zones = load_zones(args.zones) if args.zones else ZoneCatalog(config.DEFAULT_ZONES)
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    app = SpatializerApp(
        zones,
        objects=args.objects,
        radius=args.radius,
        host=args.host,
        port=args.port,
        mock_osc=args.mock,
        meter_port=args.meter_port,
        layout_dir=args.layout_dir,
        verbose=not args.quiet,
    )
    if args.list_layouts:
        for name in app.layouts.names():
            print(name)
        return 0
    if args.delete:
        return 0 if app.delete_layout(args.delete) else 1
    if args.load:
        app.load_layout(args.load)

    # Handle signals gracefully
    def signal_handler(sig, frame):
        app.running = False

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if args.headless:
        app.run_headless()
    else:
        app.run(layout_name=args.save or args.load or config.DEFAULT_LAYOUT_NAME)

    if args.save and not app.save_layout(args.save):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Test script to verify the OSC link to the audio system.

Sweeps one object around the circle, snaps it, and toggles a solo so you
can watch the receiving side react. Make sure to:
1. Start the audio system (or an OSC monitor) listening on the target port
2. Match the port with --port (default from spatializer.config)
"""

import argparse
import time

from pythonosc import udp_client

from spatializer import config
from spatializer.angles import from_bearing, to_bearing


def test_osc_connection(host: str, port: int, index: int) -> None:
    """Send a bearing sweep, a snapped position and a solo toggle."""

    print("OSC Test Script for the Spatializer Panel")
    print("=" * 50)
    print(f"Target: {host}:{port}")
    print()
    print("Message formats:")
    print(f"  {config.OSC_OBJECT_POSITION} index bearing   (int, int or float)")
    print(f"  {config.OSC_SOLO_ON} / {config.OSC_SOLO_OFF} channel")
    print()

    client = udp_client.SimpleUDPClient(host, port)

    # Test 1: Full turn in 10 degree steps, integer bearings as during a drag
    print(f"Test 1: Sweeping object {index} once around the circle...")
    for step in range(0, 360, 10):
        bearing = to_bearing(from_bearing(step, config.DRAG_RADIUS))
        client.send_message(config.OSC_OBJECT_POSITION, [index, bearing])
        time.sleep(0.05)

    # Test 2: Snapped position carries a float bearing
    print("\nTest 2: Snapping to 22.5 degrees...")
    print(f"  Sending: {config.OSC_OBJECT_POSITION} {index} 22.5")
    client.send_message(config.OSC_OBJECT_POSITION, [index, 22.5])
    time.sleep(0.5)

    # Test 3: Solo on and off
    print(f"\nTest 3: Solo channel {index} for 1 second...")
    client.send_message(config.OSC_SOLO_ALL, [0])
    client.send_message(config.OSC_SOLO_ON, [index])
    time.sleep(1.0)
    client.send_message(config.OSC_SOLO_OFF, [index])
    client.send_message(config.OSC_SOLO_ALL, [1])

    print("\n" + "=" * 50)
    print("Did the source move and solo?")
    print()
    print("If YES: OSC is working! Run the full panel:")
    print("  python -m spatializer.main")
    print()
    print("If NO, check:")
    print("  1. The receiver is running and listening on UDP")
    print("  2. The port matches (currently", port, ")")
    print("  3. No firewall is dropping local UDP traffic")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--host", default=config.OSC_HOST)
    parser.add_argument("--port", type=int, default=config.OSC_PORT)
    parser.add_argument("--object", type=int, default=1)
    args = parser.parse_args()
    test_osc_connection(args.host, args.port, args.object)

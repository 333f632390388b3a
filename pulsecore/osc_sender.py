# Sends random control messages to a running PulseGrid.py
from pythonosc import udp_client
import time
import random
import argparse

MODES = ["signal_mesh", "magnetic_field", "heat_pulse", "stress_wave", "neuro_spark"]


def main():
    parser = argparse.ArgumentParser(description='Send test OSC control messages to PulseGrid.py')
    parser.add_argument('--ip', default='127.0.0.1', help='The IP to send OSC messages to')
    parser.add_argument('--port', type=int, default=5005, help='The port to send OSC messages to')
    parser.add_argument('--delay', type=float, default=0.5, help='Delay between messages in seconds')
    args = parser.parse_args()

    client = udp_client.SimpleUDPClient(args.ip, args.port)

    print(f"Sending OSC control messages to {args.ip}:{args.port}")
    print("Press Ctrl+C to stop")

    message_types = [
        ("/pulsegrid/intensity", lambda: random.uniform(0.1, 1.0)),
        ("/pulsegrid/speed", lambda: [random.choice(MODES), random.uniform(0.1, 2.0)]),
        ("/pulsegrid/brightness", lambda: [random.choice(MODES), random.uniform(0.1, 1.0)]),
        ("/pulsegrid/line_width", lambda: [random.choice(MODES), random.uniform(0.5, 5.0)]),
        ("/pulsegrid/scheme", lambda: [random.choice(MODES), random.choice(["Default", "Electric", "Fire", "Arctic"])]),
    ]

    try:
        count = 0
        while True:
            address, value_generator = random.choice(message_types)
            client.send_message(address, value_generator())
            count += 1

            # Every 20 messages flip the running flag
            if count % 20 == 0:
                client.send_message("/pulsegrid/toggle", [])

            time.sleep(args.delay)

    except KeyboardInterrupt:
        print("\nStopping OSC control sender")


if __name__ == "__main__":
    main()

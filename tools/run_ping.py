# tools/run_ping.py
# Usage examples:
#   python3 -m tools.run_ping 8.8.8.8
#   python3 -m tools.run_ping 8.8.8.8 1.1.1.1 -n 10 --wait 500 --format text
#   python3 -m tools.run_ping example.com -t --sound until-first-success -a
#   python3 -m tools.run_ping fake --backend fake -n 5

import argparse
import json
import logging
import signal
import sys
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

from pingstat.config import SoundPolicy, build_options
from pingstat.errors import InvalidOptionsError, UnresolvableTargetError
from pingstat.logging_config import setup_logger
from pingstat.render import report_text
from pingstat.reporter.controller import PingReporter

EXIT_UNRESOLVABLE = 2


def make_prober(args, options):
    if args.backend == "fake":
        from pingstat.prober.fake import FakeProber
        return FakeProber(script=[10, 12, 11, 13, 9], default=11)
    if args.backend == "system":
        from pingstat.prober.system import SystemPingProber
        return SystemPingProber(payload_size=options.payload_size, ttl=options.ttl)
    from pingstat.prober.icmp import IcmpProber
    return IcmpProber(payload_size=options.payload_size, ttl=options.ttl, privileged=not args.unprivileged)


def run_one(args, options, cancel, announce):
    # each run gets its own prober so concurrent targets never share a socket
    with make_prober(args, options) as prober:
        return PingReporter(prober, announce=announce).run(options, cancel)


def build_argparser():
    ap = argparse.ArgumentParser(description="Timed ICMP echo runs with round-trip statistics")
    ap.add_argument("targets", nargs="+", help="Destination host(s)/IP(s)")
    ap.add_argument("-n", "--count", type=int, default=1, help="Number of echo requests to send")
    ap.add_argument("-t", "--infinite", action="store_true", help="Ping until interrupted (Ctrl+C)")
    ap.add_argument("-w", "--timeout", type=float, default=None, help="Per-attempt timeout (default 3000 ms)")
    ap.add_argument("--timeout-unit", choices=["ms", "s"], default="ms")
    ap.add_argument("--wait", type=float, default=None,
                    help="Delay between attempts, reduced by the time each attempt took "
                         "(default 0, or 1000 ms with --infinite)")
    ap.add_argument("--wait-unit", choices=["ms", "s"], default="ms")
    ap.add_argument("-a", "--resolve", action="store_true", help="Reverse-resolve the responding address")
    ap.add_argument("--announce", action="store_true", help="Print one line per attempt")
    ap.add_argument("--sound", default=SoundPolicy.SILENT.value, choices=[p.value for p in SoundPolicy],
                    help="When to ring the terminal bell")
    ap.add_argument("--sound-threshold", type=int, default=5,
                    help="Bells for the after-every-* policies; negative = unlimited")
    ap.add_argument("-l", "--size", type=int, default=32, help="Echo payload size in bytes")
    ap.add_argument("-i", "--ttl", type=int, default=128, help="IP time to live")
    ap.add_argument("--backend", default="icmp", choices=["icmp", "system", "fake"],
                    help="icmplib sockets, the platform ping binary, or a scripted fake")
    ap.add_argument("--unprivileged", action="store_true", help="Use unprivileged ICMP sockets (icmp backend)")
    ap.add_argument("--format", default="json", choices=["json", "text"])
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv=None):
    ap = build_argparser()
    args = ap.parse_args(argv)
    setup_logger("pingstat", logging.DEBUG if args.verbose else logging.WARNING)

    try:
        all_options = [
            build_options(
                target,
                count=args.count,
                timeout=args.timeout,
                timeout_unit=args.timeout_unit,
                wait=args.wait,
                wait_unit=args.wait_unit,
                resolve_name=args.resolve,
                unbounded=args.infinite,
                announce=args.announce,
                sound_policy=args.sound,
                sound_threshold=args.sound_threshold,
                payload_size=args.size,
                ttl=args.ttl,
            )
            for target in args.targets
        ]
    except InvalidOptionsError as e:
        ap.error(str(e))

    cancel = threading.Event()
    previous_handler = None
    if args.infinite:
        previous_handler = signal.signal(signal.SIGINT, lambda *_: cancel.set())

    # prefix live lines with the target when several runs interleave
    def announcer(target):
        if len(all_options) == 1:
            return print
        return lambda line: print(f"[{target}] {line}")

    reports = [None] * len(all_options)
    failed = False
    try:
        with ThreadPoolExecutor(max_workers=len(all_options)) as pool:
            futures = {pool.submit(run_one, args, o, cancel, announcer(o.target)): i
                       for i, o in enumerate(all_options)}
            for future in as_completed(futures):
                try:
                    reports[futures[future]] = future.result()
                except UnresolvableTargetError as e:
                    # stop unbounded siblings; bounded ones finish their count
                    cancel.set()
                    failed = True
                    print(f"pingstat: {e}", file=sys.stderr)
    finally:
        if args.infinite:
            signal.signal(signal.SIGINT, previous_handler or signal.default_int_handler)

    done = [r for r in reports if r is not None]
    if done:
        if args.format == "text":
            print("\n\n".join(report_text(r) for r in done))
        else:
            out = [r.to_dict() for r in done]
            print(json.dumps(out[0] if len(args.targets) == 1 else out, indent=2))
    return EXIT_UNRESOLVABLE if failed else 0


if __name__ == "__main__":
    sys.exit(main())

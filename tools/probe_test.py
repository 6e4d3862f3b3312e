# tools/probe_test.py
# Usage: python3 -m tools.probe_test 8.8.8.8 [timeout_ms] [icmp|system]
import sys
import json

from pingstat.errors import UnresolvableTargetError


def main():
    if len(sys.argv) < 2:
        print("Usage: python3 -m tools.probe_test <target_ip_or_host> [timeout_ms] [icmp|system]")
        return 1
    target = sys.argv[1]
    timeout_ms = int(sys.argv[2]) if len(sys.argv) > 2 else 3000
    backend = sys.argv[3] if len(sys.argv) > 3 else "icmp"

    if backend == "system":
        from pingstat.prober.system import SystemPingProber
        p = SystemPingProber()
    else:
        from pingstat.prober.icmp import IcmpProber
        p = IcmpProber()

    with p:
        try:
            outcome = p.probe(target, timeout_ms)
        except UnresolvableTargetError as e:
            print(json.dumps({"target": e.target, "error": e.detail}, indent=2))
            return 2
    print(json.dumps(outcome.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
    $ python -m pyusd_stellar check-balance
    $ python -m pyusd_stellar create-trustline
    $ python -m pyusd_stellar send-pyusd <destination_address> <amount> [memo]
"""
import sys

from pyusd_stellar.commands import check_balance, create_trustline, send_pyusd

COMMANDS = {
    "check-balance": check_balance.main,
    "create-trustline": create_trustline.main,
    "send-pyusd": send_pyusd.main,
}


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in COMMANDS:
        print(f"Usage: python -m pyusd_stellar {{{','.join(COMMANDS)}}} [args...]", file=sys.stderr)
        sys.exit(1)
    COMMANDS[argv[0]](argv[1:])


if __name__ == "__main__":
    main()

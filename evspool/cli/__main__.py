import sys
import logging
from evspool.cli.parser import get_parent_parser
from evspool.cli.inspect import get_parsers, run_count, run_dump, run_clear

parser = get_parent_parser('evspool', 'evspool CLI')

subparsers = parser.add_subparsers(dest='command', title='command', help='CLI commands')
get_parsers(subparsers)

args = parser.parse_args()

if args.version:
    from evspool.metadata import version
    print('evspool', version)
    sys.exit(0)

if args.verbose:
    logging.basicConfig(level=logging.DEBUG)

if args.command == 'count':
    run_count(args, sys.stdout)
elif args.command == 'dump':
    run_dump(args, sys.stdout)
elif args.command == 'clear':
    run_clear(args, sys.stdout)

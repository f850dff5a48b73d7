from evspool.cli.parser import get_parent_parser


def test_get_parent_parser():
    parser = get_parent_parser('test', 'test description')

    assert parser is not None

    args = parser.parse_args(['-c', '/etc/evspool.yaml', '-d', '/data', '--verbose'])

    assert args.config == '/etc/evspool.yaml'
    assert args.data_dir == '/data'
    assert args.verbose is True
    assert args.version is False

    args = parser.parse_args(['--version'])

    assert args.version is True
    assert args.config is None
    assert args.data_dir is None

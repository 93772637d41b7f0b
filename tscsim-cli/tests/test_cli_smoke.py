import unittest
from tscsim_cli.main import make_parser


class TestCLISmoke(unittest.TestCase):
    def test_subcommands_exist(self):
        p = make_parser()
        names = set(p._subparsers._group_actions[0]._name_parser_map.keys())
        for cmd in ("calc", "simulate"):
            self.assertIn(cmd, names)
        calc = p._subparsers._group_actions[0]._name_parser_map["calc"]
        calc_names = set(calc._subparsers._group_actions[0]._name_parser_map.keys())
        for cmd in ("hrtime", "tsc", "guest-tsc", "offset", "freq"):
            self.assertIn(cmd, calc_names)

    def test_simulate_defaults(self):
        ns = make_parser().parse_args(["simulate"])
        self.assertEqual(ns.duration, 20)
        self.assertEqual(ns.initial_host_tsc, 1_000_000_000)
        self.assertEqual(ns.initial_host_hz, 1_000_000_000)
        self.assertEqual(ns.guest_hz, 1_000_000_000)
        self.assertEqual(ns.arch, "amd")
        self.assertEqual(ns.hosts, [])
        self.assertFalse(ns.hex)

    def test_hex_arguments(self):
        ns = make_parser().parse_args(["calc", "hrtime", "-t", "0x3b9aca00"])
        self.assertEqual(ns.tsc, 1_000_000_000)

    def test_bad_number_is_usage_error(self):
        with self.assertRaises(SystemExit) as cm:
            make_parser().parse_args(["calc", "hrtime", "-t", "-5"])
        self.assertEqual(cm.exception.code, 2)


if __name__ == "__main__":
    unittest.main()

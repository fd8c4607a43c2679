"""
Командная строка для построения кодов Хаффмана.
"""

import argparse
import sys

from huffman import HuffmanEncoder
from report import display_codes, report_efficiency


DEMO_MESSAGE = "this is an example of a huffman tree"


def read_message(args) -> str:
    if args.file:
        with open(args.file, 'r', encoding='latin-1') as f:
            return f.read()
    if args.message is not None:
        return args.message
    return DEMO_MESSAGE


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Huffman code builder',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py codes "aabbbcc"
  python main.py encode "abracadabra"
  python main.py stats -f message.txt
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command')

    for name, help_text in (('codes', 'Print code table and efficiency'),
                            ('encode', 'Print encoded bit string'),
                            ('stats', 'Print efficiency only')):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('message', nargs='?', help='Message to encode (demo text if omitted)')
        sub.add_argument('-f', '--file', help='Read message from file')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    try:
        message = read_message(args)

        if args.command == 'codes':
            result = HuffmanEncoder.build(message)
            display_codes(result)
            report_efficiency(result)

        elif args.command == 'encode':
            _, bits = HuffmanEncoder.encode(message)
            print(bits)

        elif args.command == 'stats':
            report_efficiency(HuffmanEncoder.build(message))

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()

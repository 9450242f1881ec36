"""
Tabshare - Receipt Bill Splitter

python3 main.py                                              # Interactive CLI mode
python3 main.py receipt.jpg                                  # Load image and start CLI
python3 main.py receipt.jpg --quick -i "Alex had the steak"  # Quick mode - just show the split
python3 main.py --even 100 --names Alex,Sam,Jo               # Even split, no network
python3 main.py --help                                       # Show help
"""

import argparse
import logging
import os
import sys

from bill_splitter import BillSplitter
from cli_interface import TabshareCLI, export_split, format_split
from config import CURRENCY_DEFAULT, LOG_LEVEL, MAX_AMOUNT
from constants import TIP_OPTIONS
from errors import TabshareError
from utils import parse_names, try_parse_float
from vision_client import VisionSplitClient


def quick_process(image_path: str, instructions: str, tip: int, currency: str, output: str = None) -> int:
    """Quick processing mode - just show the split"""
    print(f"🚀 Quick split: {image_path}")

    with VisionSplitClient() as client:
        try:
            result = client.split_receipt(image_path, instructions, tip)
        except TabshareError as e:
            print(f"\n❌ Could not calculate split: {e}")
            return 1

    print(format_split(result, currency))
    print(f"\n⚡ Model answered in {client.metrics.latency_seconds:.2f}s")

    if output:
        export_split(result, output, currency)
        print(f"✅ Exported to {output}")
    return 0


def bill_total(value: str) -> float:
    """argparse type for a finite, non-negative bill total"""
    total = try_parse_float(value)
    if total is None or total < 0 or total > MAX_AMOUNT:
        raise argparse.ArgumentTypeError(f"invalid bill total: {value!r}")
    return total


def even_process(total: float, names: list, currency: str, output: str = None) -> int:
    if not names:
        print("❌ --even needs --names")
        return 1

    result = BillSplitter().split_evenly(total, names)
    print(format_split(result, currency))

    if output:
        export_split(result, output, currency)
        print(f"✅ Exported to {output}")
    return 0


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Tabshare - Receipt Bill Splitter',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                    # Interactive mode
  python main.py receipt.jpg                        # Load image then interactive
  python main.py receipt.jpg --quick -i "..." --tip 18
  python main.py --even 100 --names Alex,Sam,Jo
        """
    )

    parser.add_argument(
        'image',
        nargs='?',
        help='Receipt image to split'
    )
    parser.add_argument(
        '-i', '--instructions',
        default='',
        help='How to split the bill, in plain language'
    )
    parser.add_argument(
        '--tip',
        type=int,
        default=0,
        choices=TIP_OPTIONS,
        help='Tip percentage (default: 0)'
    )
    parser.add_argument(
        '--quick',
        action='store_true',
        help='Quick mode - split the image and show results only'
    )
    parser.add_argument(
        '--even',
        type=bill_total,
        metavar='TOTAL',
        help='Split TOTAL evenly between --names'
    )
    parser.add_argument(
        '--names',
        default='',
        help='Comma-separated names'
    )
    parser.add_argument(
        '--currency',
        default=CURRENCY_DEFAULT,
        help=f'Currency code for display (default: {CURRENCY_DEFAULT})'
    )
    parser.add_argument(
        '-o', '--output',
        help='Write the split to this JSON file'
    )
    parser.add_argument(
        '--version',
        action='version',
        version='Tabshare 1.0'
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.WARNING),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    names = parse_names(args.names)

    if args.even is not None:
        sys.exit(even_process(args.even, names, args.currency, args.output))

    if args.quick and args.image:
        if not os.path.exists(args.image):
            print(f"❌ File not found: {args.image}")
            sys.exit(1)

        instructions = args.instructions or (f"Split between {', '.join(names)}" if names else '')
        if not instructions:
            print("❌ --quick needs --instructions or --names")
            sys.exit(1)

        sys.exit(quick_process(args.image, instructions, args.tip, args.currency, args.output))

    cli = TabshareCLI(currency=args.currency)
    cli.people = names
    cli.instructions = args.instructions
    cli.tip_percentage = args.tip

    if args.image:
        cli.load_receipt(args.image)

    try:
        cli.run()
    finally:
        cli.client.close()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n👋 Goodbye!")
        sys.exit(0)

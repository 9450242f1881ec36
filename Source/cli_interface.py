"""
CLI Interface module for Tabshare
Command-line interface for receipt bill splitting
"""

import json
from dataclasses import asdict
from datetime import datetime

from bill_splitter import BillSplitter
from config import CURRENCY_DEFAULT, MAX_AMOUNT
from constants import TIP_OPTIONS
from data_models import PriceComparison, SplitResult
from errors import (
    ConfigurationError, ExtractionServiceError, InvalidImageError, RateLimitError, SplitResponseError,
)
from money import format_currency, round_currency
from price_check import calculate_rip_off_score, calculate_total_overpayment, is_overpriced
from utils import (
    clean_text_for_display, parse_names, sanitize_filename, try_parse_float,
    validate_image_path, validate_menu_choice,
)
from vision_client import VisionSplitClient


def format_split(result: SplitResult, currency: str = CURRENCY_DEFAULT) -> str:
    """Render a split result as a text table"""
    lines = ["=" * 50, "💸 BILL SPLIT", "=" * 50]

    for person in result.bill_split.individuals:
        lines.append(f"\n{clean_text_for_display(person.name, 30)}")
        for item in person.items:
            name = clean_text_for_display(item.name, 28)
            lines.append(f"   {name:28} {item.quantity:2}x {format_currency(item.line_total, currency):>12}")
        lines.append(f"   {'Subtotal:':31} {format_currency(person.subtotal, currency):>12}")
        if person.tax_share:
            lines.append(f"   {'Tax:':31} {format_currency(person.tax_share, currency):>12}")
        if person.tip_share:
            lines.append(f"   {'Tip:':31} {format_currency(person.tip_share, currency):>12}")
        lines.append(f"   {'OWES:':31} {format_currency(person.owed, currency):>12}")

    lines.append("\n" + "-" * 50)
    lines.append(f"{'TOTAL:':34} {format_currency(result.bill_split.total, currency):>12}")
    lines.append(f"{'Sum owed:':34} {format_currency(result.bill_split.total_owed, currency):>12}")

    if result.has_mismatch:
        lines.append(
            f"\n⚠ Shares differ from the receipt total by "
            f"{format_currency(result.validation.difference, currency)}. Please double-check."
        )
    return "\n".join(lines)


def export_split(result: SplitResult, filename: str, currency: str = CURRENCY_DEFAULT) -> None:
    data = {
        'export_info': {
            'timestamp': datetime.now().isoformat(),
            'version': '1.0',
            'currency': currency,
        },
        'split': result.bill_split.to_dict(),
        'tax': float(result.tax),
        'tip': float(result.tip),
        'validation': {
            'isValid': result.validation.is_valid,
            'difference': float(result.validation.difference),
        },
    }
    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


class TabshareCLI:
    """Command-line interface for Tabshare"""

    def __init__(self, client: VisionSplitClient = None, splitter: BillSplitter = None,
                 currency: str = CURRENCY_DEFAULT):
        self.image_path = None
        self.people = []
        self.instructions = ""
        self.tip_percentage = 0
        self.result = None
        self.client = client or VisionSplitClient()
        self.splitter = splitter or BillSplitter()
        self.currency = currency

    def display_banner(self):
        """Display application banner"""
        print("\n" + "="*60)
        print("🧾  TABSHARE - Receipt Bill Splitter")
        print("Describe who had what, get an exact split")
        print("="*60)

    def load_receipt(self, image_path: str) -> bool:
        if not validate_image_path(image_path):
            print("⚠ Invalid or unsupported image")
            return False
        self.image_path = image_path
        print(f"✓ Receipt loaded: {image_path}")
        return True

    def manage_people(self):
        """Manage people for bill splitting"""
        print("\n" + "="*50)
        print("👥 PEOPLE")
        print("="*50)
        print(f"Current people: {', '.join(self.people) if self.people else 'None'}")

        names = parse_names(input("Enter names (comma-separated, empty to keep): "))
        if names:
            self.people = names
            print(f"✓ People: {', '.join(self.people)}")

    def set_instructions(self):
        text = input("\nHow should the bill be split? ").strip()
        if text:
            self.instructions = text
            print("✓ Instructions saved")

    def choose_tip(self):
        """Choose a tip percentage"""
        options = [str(tip) for tip in TIP_OPTIONS]
        print(f"\nTip options: {', '.join(f'{tip}%' for tip in TIP_OPTIONS)}")
        choice = validate_menu_choice(input("Tip %: ").replace('%', ''), options)
        if choice is None:
            print("Invalid tip")
            return
        self.tip_percentage = int(choice)
        print(f"✓ Tip: {self.tip_percentage}%")

    def split_with_model(self):
        """Ask the vision model for a split and recompute it"""
        if not self.image_path:
            print("\n⚠ Load a receipt first")
            return

        instructions = self.instructions
        if not instructions and self.people:
            instructions = f"Split between {', '.join(self.people)}"
        if not instructions:
            print("\n⚠ Add people or splitting instructions first")
            return

        print("\n🚀 Calculating split...")
        try:
            self.result = self.client.split_receipt(
                self.image_path, instructions, self.tip_percentage, splitter=self.splitter,
            )
        except ConfigurationError as e:
            print(f"\n❌ {e}")
            return
        except RateLimitError:
            print("\n⚠ Too many requests. Wait a moment and choose 'Split with AI' again.")
            return
        except (SplitResponseError, ExtractionServiceError, InvalidImageError) as e:
            print("\n❌ Could not calculate split. Choose 'Split with AI' again to retry.")
            print(f"   Reason: {e}")
            return

        print(format_split(self.result, self.currency))

    def split_evenly(self):
        if not self.people:
            print("\n⚠ No people added yet")
            return

        total = try_parse_float(input("\nEnter total to split: "))
        if total is None or total < 0 or total > MAX_AMOUNT:
            print("Invalid amount")
            return

        self.result = self.splitter.split_evenly(total, self.people)
        print(format_split(self.result, self.currency))

    def check_prices(self):
        """Compare the split's item prices against typical prices"""
        if not self.result:
            print("\n⚠ Calculate a split first")
            return

        comparisons = []
        for person in self.result.bill_split.individuals:
            for item in person.items:
                average = try_parse_float(input(f"Typical price of {item.name} (empty to skip): "))
                if average is None or average <= 0 or average > MAX_AMOUNT:
                    continue
                comparison = PriceComparison(item.name, item.price, round_currency(average))
                comparisons.append(comparison)
                if is_overpriced(comparison.receipt_price, comparison.average_price):
                    print(f"  ⚠ {item.name} looks overpriced")

        print(f"\nRip-off score:    {calculate_rip_off_score(comparisons)}/10")
        print(f"Overpaid by:      {format_currency(calculate_total_overpayment(comparisons), self.currency)}")

    def export_results(self):
        """Export the split to JSON"""
        if not self.result:
            print("\n⚠ No split to export")
            return

        filename = sanitize_filename(f"tabshare_split_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json")
        try:
            export_split(self.result, filename, self.currency)
        except OSError as e:
            print(f"\nExport failed: {e}")
            return
        print(f"\n✅ Split exported to {filename}")

    def display_metrics(self):
        m = self.client.metrics
        print("\n" + "="*50)
        print("🚀 LAST REQUEST")
        print("="*50)
        for key, value in asdict(m).items():
            print(f"{key.replace('_', ' ').title():18} {value}")

    def run(self):
        """Run the CLI application"""
        self.display_banner()

        while True:
            print("\n" + "="*50)
            print("MAIN MENU")
            print("="*50)
            print("1. Load receipt image")
            print("2. Set people")
            print("3. Describe the split")
            print("4. Choose tip")
            print("5. Split with AI")
            print("6. Split evenly")
            print("7. Check prices")
            print("8. Export results")
            print("9. Show request metrics")
            print("0. Exit")

            choice = validate_menu_choice(input("\nChoice: "), [str(i) for i in range(10)]) or ''

            if choice == '1':
                self.load_receipt(input("Enter image path: ").strip())
            elif choice == '2':
                self.manage_people()
            elif choice == '3':
                self.set_instructions()
            elif choice == '4':
                self.choose_tip()
            elif choice == '5':
                self.split_with_model()
            elif choice == '6':
                self.split_evenly()
            elif choice == '7':
                self.check_prices()
            elif choice == '8':
                self.export_results()
            elif choice == '9':
                self.display_metrics()
            elif choice == '0':
                print("\n👋 Thank you for using Tabshare!")
                break

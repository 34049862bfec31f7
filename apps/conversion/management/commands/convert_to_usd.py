from decimal import Decimal, ROUND_HALF_UP

from django.core.management.base import BaseCommand, CommandError

from apps.conversion.domain.errors import ConversionError
from apps.conversion.domain.services import RateResolver


CENT = Decimal("0.01")


class Command(BaseCommand):
    help = 'Convert an amount to USD at the exchange rate of a given date'

    def add_arguments(self, parser):
        parser.add_argument(
            '--amount',
            dest='amount',
            type=str,
            help='Amount to convert (e.g. 100 or 12.50)'
        )
        parser.add_argument(
            '--currency',
            dest='currency',
            type=str,
            help='Source currency code (e.g. EUR)'
        )
        parser.add_argument(
            '--date',
            dest='date',
            type=str,
            help='Date of the rate in YYYY-MM-DD format'
        )
        parser.add_argument(
            '--list-currencies',
            action='store_true',
            help='Print the latest rate of every available currency instead of converting'
        )

    def handle(self, **options):
        resolver = RateResolver()

        if options['list_currencies']:
            self._list_currencies(resolver)
            return

        missing = [name for name in ('amount', 'currency', 'date') if not options[name]]
        if missing:
            raise CommandError(f"Missing required option(s): {', '.join('--' + m for m in missing)}")

        try:
            result = resolver.convert_with_details(options['amount'], options['currency'], options['date'])
        except ConversionError as e:
            raise CommandError(e.message)

        converted = result.converted_amount_usd.quantize(CENT, rounding=ROUND_HALF_UP)
        self.stdout.write(
            self.style.SUCCESS(
                f"{result.original_amount} {result.source_currency} on {result.valuation_date.isoformat()} "
                f"= {converted} USD"
            )
        )
        self.stdout.write(f"Exchange rate: 1 {result.source_currency} = {result.implied_rate} USD")
        self.stdout.write(f"Provider: {result.provider_name}")

    def _list_currencies(self, resolver: RateResolver):
        try:
            rates = resolver.list_available_currencies()
        except ConversionError as e:
            raise CommandError(e.message)

        for code, rate in sorted(rates.items()):
            self.stdout.write(f"{code}\t{rate}")
        self.stdout.write(self.style.SUCCESS(f"{len(rates)} currencies available"))

"""
Management command to check a Form 5 readiness payload before submission

Usage:
    python manage.py check_readiness readiness.json
    python manage.py check_readiness readiness.json --update credits=120 --update lms_name=Moodle
    python manage.py check_readiness - --json < readiness.json
"""
import json
import sys

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from readiness.forms import parse_readiness_payload
from readiness.services.completion import SECTION_TITLES
from readiness.services.submission import evaluate_submission


def _parse_update(raw):
    """KEY=VALUE, where VALUE is read as JSON when possible (true, null, 120, ...)"""
    if '=' not in raw:
        raise CommandError(f'Invalid update "{raw}". Expected KEY=VALUE.')
    key, value = raw.split('=', 1)
    try:
        value = json.loads(value)
    except ValueError:
        pass
    return key.strip(), value


class Command(BaseCommand):
    help = 'Score a Form 5 readiness payload and check whether it can be submitted'

    def add_arguments(self, parser):
        parser.add_argument(
            'path',
            help='JSON file with the readiness record, or - to read from stdin',
        )
        parser.add_argument(
            '--update',
            action='append',
            default=[],
            metavar='KEY=VALUE',
            help='Pending field update to apply before validating (repeatable)',
        )
        parser.add_argument(
            '--json',
            action='store_true',
            help='Print the result as JSON instead of a report',
        )
        parser.add_argument(
            '--no-fail',
            action='store_true',
            help='Exit normally even when the record cannot be submitted',
        )

    def handle(self, *args, **options):
        payload = self._load_payload(options['path'])
        updates = dict(_parse_update(raw) for raw in options['update'])

        try:
            record = parse_readiness_payload(payload)
        except ValidationError as exc:
            raise CommandError(f'Invalid readiness payload: {exc}')

        if updates:
            try:
                record = parse_readiness_payload({**record.to_dict(), **updates})
            except ValidationError as exc:
                raise CommandError(f'Invalid pending update: {exc}')

        decision = evaluate_submission(record)

        if options['json']:
            self.stdout.write(json.dumps({
                'overall_completion': decision.overall_completion,
                'section_completion_data': decision.completion_snapshot,
                **decision.validation.to_dict(),
            }, indent=2))
        else:
            self._write_report(decision)

        if not decision.can_submit and not options['no_fail']:
            raise CommandError(decision.validation.errors[0])

    def _load_payload(self, path):
        try:
            if path == '-':
                return json.load(sys.stdin)
            with open(path, encoding='utf-8') as fh:
                return json.load(fh)
        except OSError as exc:
            raise CommandError(f'Could not read {path}: {exc}')
        except ValueError as exc:
            raise CommandError(f'{path} is not valid JSON: {exc}')

    def _write_report(self, decision):
        record = decision.record
        self.stdout.write(self.style.NOTICE(
            f'Form 5 readiness: {record.qualification_title or "(untitled)"} '
            f'[{record.delivery_mode}]'
        ))

        for section_name, section in decision.completion_snapshot.items():
            line = f"  {SECTION_TITLES.get(section_name, section_name):<55} {section['completed']:>3}%"
            if section['missing_fields']:
                line += f"  missing: {', '.join(section['missing_fields'])}"
            style = self.style.SUCCESS if section['completed'] == 100 else self.style.WARNING
            self.stdout.write(style(line))

        self.stdout.write(f"\nOverall completion: {decision.overall_completion}%")

        for error in decision.validation.errors:
            self.stdout.write(self.style.ERROR(f'  ERROR: {error}'))
        for warning in decision.validation.warnings:
            self.stdout.write(self.style.WARNING(f'  WARNING: {warning}'))

        if decision.can_submit:
            self.stdout.write(self.style.SUCCESS('\nReady for submission'))
        else:
            self.stdout.write(self.style.ERROR(
                f'\nNot ready for submission ({len(decision.validation.errors)} errors)'
            ))

"""
Test the logging sanitizer utility.
License keys and credentials must be redacted from logged request bodies.
"""

from asset_tracker.utils.logging_sanitizer import (
    sanitize_dict,
    sanitize_exception_message,
    sanitize_form_data,
)
from werkzeug.datastructures import ImmutableMultiDict


def test_sanitize_dict_redacts_license_keys():
    result = sanitize_dict({'name': 'Office 365', 'key': 'ABCD-1234', 'seats': '10'})

    assert result['name'] == 'Office 365'
    assert result['key'] == '[REDACTED]'
    assert result['seats'] == '10'


def test_sanitize_dict_is_case_insensitive():
    result = sanitize_dict({'Password': 'a', 'LicenseKey': 'b', 'apiKey': 'c'})

    assert result['Password'] == '[REDACTED]'
    assert result['LicenseKey'] == '[REDACTED]'
    assert result['apiKey'] == '[REDACTED]'


def test_sanitize_dict_recurses_into_nested_data():
    result = sanitize_dict({
        'license': {'name': 'CAD', 'key': 'XYZ'},
        'assets': [{'assetTag': 'A-1', 'token': 't'}, 'plain'],
    })

    assert result['license'] == {'name': 'CAD', 'key': '[REDACTED]'}
    assert result['assets'] == [{'assetTag': 'A-1', 'token': '[REDACTED]'}, 'plain']


def test_sanitize_dict_empty_and_custom_text():
    assert sanitize_dict({}) == {}
    assert sanitize_dict(None) is None
    assert sanitize_dict({'secret': 's'}, redact_text='***') == {'secret': '***'}


def test_sanitize_form_data():
    form = ImmutableMultiDict([('assetTag', 'A-1'), ('password', 'hunter2')])

    result = sanitize_form_data(form)

    assert result == {'assetTag': 'A-1', 'password': '[REDACTED]'}


def test_sanitize_exception_message():
    assert sanitize_exception_message(ValueError('bad seats value')) == 'bad seats value'
    assert sanitize_exception_message(ValueError('token expired')) == 'ValueError: [Message contains sensitive data]'
    # 'key' alone is too common in database messages to hide them
    assert sanitize_exception_message(KeyError('foreign key')) == "'foreign key'"

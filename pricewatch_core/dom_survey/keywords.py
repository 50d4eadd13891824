"""
Keyword sets for semantic element detection (English and Persian).

Matching is plain substring search over the lower-cased concatenation of
an element's placeholder, class, id, name and type.
"""

from typing import Iterable

SEARCH_KEYWORDS = (
    'search', 'جستجو', 'food', 'غذا', 'restaurant', 'رستوران', 'find', 'look',
    'جستجو کنید', 'غذا جستجو', 'رستوران جستجو', 'search food', 'search restaurant',
    'what', 'چی', 'کجا', 'where', 'menu', 'منو', 'dish', 'meal',
)

# Inputs carrying any of these are never search inputs
NON_SEARCH_KEYWORDS = (
    # phone
    'phone', 'mobile', 'تلفن', 'موبایل', 'شماره', 'number', 'phone number',
    'شماره موبایل', 'شماره تلفن', 'mobile number',
    # email
    'email', 'ایمیل', 'mail', 'پست الکترونیک',
    # password
    'password', 'رمز', 'pass', 'کلمه عبور',
    # personal name
    'name', 'نام', 'first name', 'last name', 'نام خانوادگی',
    # address / location
    'address', 'آدرس', 'location', 'مکان', 'select', 'انتخاب', 'place',
    'آدرس خود را وارد کنید', 'انتخاب آدرس', 'select address', 'choose location',
    'delivery', 'تحویل', 'city', 'شهر', 'area', 'منطقه', 'neighborhood', 'محله',
    # verification
    'code', 'کد', 'verification', 'تایید', 'confirm', 'تایید کردن',
)

LOCATION_KEYWORDS = (
    'address', 'آدرس', 'location', 'مکان', 'select', 'انتخاب', 'place',
    'آدرس خود را وارد کنید', 'انتخاب آدرس', 'select address', 'choose location',
    'delivery', 'تحویل', 'city', 'شهر', 'area', 'منطقه', 'neighborhood', 'محله',
    'where', 'کجا', 'position', 'موقعیت', 'region', 'ناحیه',
)

SEARCH_BUTTON_KEYWORDS = ('search', 'جستجو', 'find', 'submit', 'go', 'برو')

RESULT_CARD_KEYWORDS = ('card', 'item', 'result', 'restaurant', 'food')

# Class-name hints used when keyword matching is inconclusive
LIKELY_SEARCH_CLASS_HINTS = ('search', 'input', 'text', 'field', 'box')
LIKELY_LOCATION_CLASS_HINTS = ('location', 'address', 'place', 'city', 'area')


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    text = text.lower()
    return any(keyword in text for keyword in keywords)


def input_signature(attributes) -> str:
    """Lower-cased text the keyword lists are matched against."""
    parts = [attributes.get(name, '') for name in ('placeholder', 'class', 'id', 'name', 'type')]
    return ' '.join(parts).lower()


def is_non_search_input(signature: str) -> bool:
    return contains_any(signature, NON_SEARCH_KEYWORDS)


def is_search_input(signature: str) -> bool:
    if is_non_search_input(signature):
        return False
    return contains_any(signature, SEARCH_KEYWORDS)


def is_location_input(signature: str) -> bool:
    return contains_any(signature, LOCATION_KEYWORDS)


def is_search_button(text_content: str, class_name: str, element_id: str) -> bool:
    return contains_any(f"{text_content} {class_name} {element_id}", SEARCH_BUTTON_KEYWORDS)


def is_result_card(class_name: str, element_id: str) -> bool:
    return contains_any(f"{class_name} {element_id}", RESULT_CARD_KEYWORDS)

# File: tesco/page_selectors.py
LOGIN_USERNAME = "#username"
LOGIN_PASSWORD = "#password"
LOGIN_SUBMIT = "#sign-in-form > button"
LOGIN_ERROR_TEXT = "p.ui-component__notice__error-text"

# Collection-mode location picker
LOCATION_ITEMS = ".location-list--item a[role=radio]"
LOCATION_TITLE_CLASS = "location-list--content-title"

# Week tabs above the slot grid
DATE_TABS = ".slot-selector--week-tabheader-link"

SLOT_MATRIX = "#slot-matrix"
AVAILABLE_SLOT_CELLS = ".slot-grid--item.available"
SLOT_START_INPUT = 'input[name="start"]'
SLOT_END_INPUT = 'input[name="end"]'

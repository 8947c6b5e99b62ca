import copy
import json

import pytest

SAMPLE_FORM = {
    "id": 7,
    "title": "Contact",
    "fields": [
        {
            "id": 1,
            "label": "Call me?",
            "type": "radio",
            "choices": [
                {"text": "Yes please", "value": "yes"},
                {"text": "No", "value": "no"},
            ],
            "conditionalLogic": "",
        },
        {"id": 2, "label": "Email", "type": "email", "choices": "", "conditionalLogic": None},
        {
            "id": "3",
            "label": "Callback times",
            "type": "checkbox",
            "conditionalLogic": {
                "actionType": "show",
                "logicType": "all",
                "rules": [
                    {"fieldId": "1", "operator": "is", "value": "yes"},
                    {"fieldId": 2, "operator": "isnot", "value": ""},
                ],
            },
        },
        {"id": 4, "label": "Comments", "type": "textarea", "conditionalLogic": ""},
        {
            "id": 5,
            "label": "Best time",
            "type": "text",
            "conditionalLogic": {
                "actionType": "hide",
                "logicType": "any",
                "rules": [{"fieldId": "3.1", "operator": "contains", "value": "Morning"}],
            },
        },
    ],
}

SAMPLE_MAP = (
    "CONDITIONAL LOGIC MAP: Contact\n"
    "\n"
    "[FIELD-ID-START]Field 1[FIELD-ID-END] [FIELD-TYPE-START][Radio Buttons][FIELD-TYPE-END] Call me?\n"
    '    └─> IS USED BY Field 3 "Callback times"\n'
    "\n"
    "[FIELD-ID-START]Field 2[FIELD-ID-END] [FIELD-TYPE-START][Email][FIELD-TYPE-END] Email\n"
    '    └─> IS USED BY Field 3 "Callback times"\n'
    "\n"
    "[FIELD-ID-START]Field 3[FIELD-ID-END] [FIELD-TYPE-START][Checkboxes][FIELD-TYPE-END] Callback times\n"
    '    ╚═[1]═> SHOW IF Field 1 "Call me?" is "Yes please"\n'
    '    ╚═[2]═> AND Field 2 "Email" is not empty\n'
    '    └─> IS USED BY Field 5 "Best time"\n'
    "\n"
    "[UNUSED-START][FIELD-ID-START]Field 4[FIELD-ID-END] [FIELD-TYPE-START][Paragraph Text][FIELD-TYPE-END] Comments\n"
    "    Not used in conditional logic[UNUSED-END]\n"
    "\n"
    "[FIELD-ID-START]Field 5[FIELD-ID-END] [FIELD-TYPE-START][Single Line Text][FIELD-TYPE-END] Best time\n"
    '    ╚═[1]═> HIDE IF Field 3 "Callback times" contains "Morning"\n'
)


@pytest.fixture
def sample_form():
    return copy.deepcopy(SAMPLE_FORM)


@pytest.fixture
def sample_map():
    return SAMPLE_MAP


@pytest.fixture
def form_file(tmp_path, sample_form):
    path = tmp_path / "form.json"
    path.write_text(json.dumps(sample_form), encoding="utf-8")
    return path

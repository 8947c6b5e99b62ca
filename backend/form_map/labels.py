"""Wording used when rendering the conditional logic map."""

MAP_HEADER = "CONDITIONAL LOGIC MAP: {title}"
UNTITLED_FORM = "Untitled form"

FIELD_LABEL = "Field {id}"
MISSING_FIELD_SUFFIX = "(missing)"

# First depends-on line opens with the action, the others with the logic joiner
SHOW_IF = "SHOW IF"
HIDE_IF = "HIDE IF"
JOIN_ALL = "AND"
JOIN_ANY = "OR"

NOT_USED = "Not used in conditional logic"

IS_EMPTY = "is empty"
IS_NOT_EMPTY = "is not empty"

OPERATOR_LABELS = {
    "is": "is",
    "isnot": "is not",
    ">": "is greater than",
    "<": "is less than",
    ">=": "is greater than or equal to",
    "<=": "is less than or equal to",
    "contains": "contains",
    "starts_with": "starts with",
    "ends_with": "ends with",
    "in": "is in",
    "not_in": "is not in",
}

FIELD_TYPE_LABELS = {
    "text": "Single Line Text",
    "textarea": "Paragraph Text",
    "select": "Drop Down",
    "multiselect": "Multi Select",
    "number": "Number",
    "checkbox": "Checkboxes",
    "radio": "Radio Buttons",
    "hidden": "Hidden",
    "html": "HTML",
    "section": "Section",
    "page": "Page",
    "name": "Name",
    "date": "Date",
    "time": "Time",
    "phone": "Phone",
    "address": "Address",
    "website": "Website",
    "email": "Email",
    "fileupload": "File Upload",
    "captcha": "CAPTCHA",
    "list": "List",
    "consent": "Consent",
    "multi_choice": "Multiple Choice",
    "image_choice": "Image Choice",
    "product": "Product",
    "quantity": "Quantity",
    "option": "Option",
    "shipping": "Shipping",
    "total": "Total",
    "calculation": "Calculation",
}

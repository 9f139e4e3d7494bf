"""Default question sets used for new forms and for "reset to default"."""

DEFAULT_LEAD_QUESTIONS = [
    {
        "type": "listingInterest",
        "order": 1,
        "required": True,
        "ui_config": {
            "label": "What listing are you interested in?",
            "placeholder": "Specify the listing here...",
            "description": "LISTING INTEREST",
        },
    },
    {
        "type": "submitterRole",
        "order": 2,
        "required": False,
        "ui_config": {
            "label": "What best describes you?",
            "placeholder": "Select your role",
            "description": "SUBMITTER ROLE",
        },
    },
    {
        "type": "name",
        "order": 3,
        "required": True,
        "ui_config": {
            "label": "What is your name?",
            "placeholder": "Enter your first name",
            "description": "NAME",
        },
    },
    {
        "type": "email",
        "order": 4,
        "required": True,
        "ui_config": {
            "label": "What is your email address?",
            "placeholder": "example@email.com",
            "description": "EMAIL ADDRESS",
        },
    },
    {
        "type": "tel",
        "order": 5,
        "required": True,
        "ui_config": {
            "label": "What is your mobile phone number?",
            "placeholder": "555-123-4567",
            "description": "MOBILE PHONE NUMBER",
        },
    },
    {
        "type": "submitButton",
        "order": 6,
        "required": True,
        "ui_config": {"label": "Submit", "description": "SUBMIT BUTTON"},
    },
]

DEFAULT_OFFER_QUESTIONS = [
    {
        "type": "specifyListing",
        "order": 1,
        "required": True,
        "ui_config": {
            "label": "What listing are you interested in?",
            "placeholder": "Specify the listing here...",
            "description": "SPECIFY LISTING",
        },
    },
    {
        "type": "submitterRole",
        "order": 2,
        "required": True,
        "ui_config": {"label": "What is your role?", "description": "SUBMITTER ROLE"},
    },
    {
        "type": "submitterName",
        "order": 3,
        "required": True,
        "ui_config": {"label": "What is your name?", "placeholder": "First Name", "description": "SUBMITTER NAME"},
    },
    {
        "type": "submitterEmail",
        "order": 4,
        "required": True,
        "ui_config": {"label": "What is your email?", "placeholder": "Email", "description": "SUBMITTER EMAIL"},
    },
    {
        "type": "submitterPhone",
        "order": 5,
        "required": True,
        "ui_config": {"label": "What is your phone number?", "placeholder": "Phone", "description": "SUBMITTER PHONE"},
    },
    {
        "type": "offerAmount",
        "order": 6,
        "required": True,
        "setup_config": {"currency_mode": "any"},
        "ui_config": {
            "label": "What is your offer amount?",
            "placeholder": "$0.00",
            "description": "OFFER AMOUNT",
        },
    },
    {
        "type": "submitButton",
        "order": 7,
        "required": True,
        "ui_config": {"label": "Submit Offer", "description": "SUBMIT BUTTON"},
    },
]

DEFAULT_QUESTIONS = {
    "lead": DEFAULT_LEAD_QUESTIONS,
    "offer": DEFAULT_OFFER_QUESTIONS,
}

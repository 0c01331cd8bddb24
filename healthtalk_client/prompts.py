
GREETING = "Hello 👋 — I'm HealthTalk. Ask anything about sexual & reproductive health."
NO_REPLY_FALLBACK = "Sorry, I couldn't generate a response."
SERVER_UNREACHABLE = "⚠️ Server error — please make sure backend is running."

# (key, button title, prompt sent when clicked)
QUICK_TOPICS = [
    ("contraception", "Contraception methods", "Explain contraception methods in simple terms."),
    ("sti", "STI prevention", "How can someone prevent STIs? Give simple, practical advice."),
    ("menstrual", "Menstrual health", "Explain menstrual health in a friendly and clear way."),
    ("emergency", "Emergency contraception", "What is emergency contraception and when should it be used?"),
    ("pregnancy", "Pregnancy info", "Give important pregnancy information for young women."),
]

TRUSTED_SOURCES = [
    ("WHO - Sexual Health", "https://www.who.int/health-topics/sexual-health"),
    ("UNFPA - SRHR", "https://www.unfpa.org/sexual-reproductive-health"),
    ("Planned Parenthood", "https://www.plannedparenthood.org"),
    ("CDC - Reproductive Health", "https://www.cdc.gov/reproductivehealth/"),
]

"""LLM prompt templates for lead enrichment, scoring and field extraction."""

# Questions put to the chat backend, in order. Later answers can lean on the
# conversation history built by earlier ones, so the order matters.
# Each template spells out the answer format it expects.
ENRICHMENT_QUESTION_TEMPLATES = (
    "What does {company} company do? Please give a short description in two lines.",
    "What is the website of the company with the domain {domain}?",
    "What are the revenue figures for the company with the domain {domain}? "
    "Only include results related to this entity and list each figure along with the source name.",
    "What is the employee size of {company} company? Please reply with only the number of "
    "employees in two short sentences, without additional explanation.",
    "How many years has {company} company been in business? Please reply with only the number "
    "of years in two short sentences, without additional explanation.",
    "What is the latest funding news for {company} company? Please reply with only the latest "
    "funding amount and date in two short sentences in bullet points, without additional explanation.",
    "Is {company} in the Fortune 500 list? Please respond with a yes or no and one short supporting detail.",
    "Is {company} in the Fortune 100 list? Please respond with a yes or no and one short supporting detail.",
    "Who are the clients of {company}? List major clients or industries they serve.",
    "What is the industry classification of {company}?",
    "What is the LinkedIn profile link of the company named {company}? Return only the link.",
)

LEAD_SCORING_PROMPT = """You are a lead scoring assistant.

Given the company's data below, assign a numeric score for each of the following criteria. Use this scoring logic:

Revenue Score (out of 20)
  - > ₹80Cr or $10M → 20 pts
  - ₹8Cr–₹80Cr or $1M–$10M → 15 pts
  - ₹80L–₹8Cr or $100k–$1M → 10 pts
  - < ₹80L or < $100k → 5 pts
  - No data → 0 pts

Employee Size (out of 10)
  - > 200 → 10 pts
  - 51–200 → 7 pts
  - 11–50 → 5 pts
  - ≤ 10 → 2 pts
  - No data → 0 pts

Years in Business (out of 10)
  - > 10 years → 10 pts
  - 5–10 years → 7 pts
  - < 5 years → 4 pts
  - No data → 0 pts

Funding Score (out of 15)
  - > $5M or ₹40Cr → 15 pts
  - < $5M or ₹40Cr → 10 pts
  - No funding → 0 pts

Fortune 500 Presence (out of 10)
  - In list → 10 pts
  - Not in list → 0 pts

Fortune 100 Presence (out of 10)
  - In list → 10 pts
  - Not in list → 0 pts

Clients / Logos / Big Accounts (out of 15)
  - Enterprise Clients or Well-known Brands → 15 pts
  - Multiple Mid-size Clients → 10 pts
  - Mostly Small Businesses → 5 pts
  - No data → 0 pts

Add the individual scores and return a total score out of 90.
Then explain briefly why you gave this score.

Output ONLY in this format:

Revenue Score: <x>/20
Employee Size Score: <x>/10
Years in Business Score: <x>/10
Funding Score: <x>/15
Fortune 500 Score: <x>/10
Fortune 100 Score: <x>/10
Clients Score: <x>/15
Total Score: <x>/90
Reason: <short explanation>

Company Data:
{company_data}
"""

CRM_FIELDS = (
    "Customer Type",
    "Contact Search",
    "Phone",
    "Mobile",
    "Description",
    "Street",
    "City",
    "State",
    "Zip Code",
    "Country",
)

CRM_FIELD_EXTRACTION_PROMPT = """Extract the following details for {company} as structured JSON if possible.
Return only:
{{
{field_lines}
}}
Return ONLY the JSON. Fill fields with data or null if not found.
Use the following company data context to answer the best you can:
{company_data}
"""

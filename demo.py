import requests

# region Constants
API_URL = "http://localhost:8000"
SUBMIT_URL = f"{API_URL}/submit-survey"

OPT_OUT = "No, just completing the survey"
# endregion


# region Utility Functions


def submit(survey_responses: dict) -> None:
    """Submit survey responses and print the outcome.

    Arguments:
        survey_responses (dict): Mapping of question ID to answer.
    """
    response = requests.post(SUBMIT_URL, json={"surveyResponses": survey_responses})
    print(f"{response.status_code}: {response.text}")


# endregion

# region Case 1️⃣: Respondent who only completes the survey.

# ℹ️ Check that the service is up.
health = requests.get(f"{API_URL}/health").json()
print(f"Health: {health}")

# 1️⃣ No contact details are required when the respondent opted out.
submit({"q1": "Daily", "q2": ["Price", "Taste"], "q21": [OPT_OUT]})

# endregion

# region Case 2️⃣: Respondent who opted in to contests and product tests.

# 2️⃣ Missing phone number, rejected with 422.
submit({"q21": ["Contests"], "name-q21": "Camille", "email-q21": "camille@example.com"})

# 3️⃣ Malformed email, rejected with 422.
submit(
    {"q21": ["Contests"], "name-q21": "Camille", "email-q21": "camille", "phone-q21": "0600000000"}
)

# 4️⃣ Complete contact details, forwarded to the spreadsheet.
submit(
    {
        "q21": ["Contests", "Product tests"],
        "name-q21": "Camille",
        "email-q21": "camille@example.com",
        "phone-q21": "0600000000",
    }
)

# endregion

# region Case 3️⃣: Requests the handler refuses.

# 5️⃣ Only POST is accepted.
response = requests.get(SUBMIT_URL)
print(f"{response.status_code}: {response.text}")

# 6️⃣ Body that is not JSON.
response = requests.post(SUBMIT_URL, data="not json")
print(f"{response.status_code}: {response.text}")

# endregion

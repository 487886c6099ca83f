"""
Static lookup tables for Instantly status codes and Firestore collection names.
"""

CAMPAIGNS_COLLECTION = "campaigns"
LEADS_COLLECTION = "leads"
SYNC_RUNS_COLLECTION = "sync_runs"
SYNC_LOCKS_COLLECTION = "sync_locks"

CAMPAIGN_STATUS = {
    1: "Active",
    2: "Paused",
    3: "Completed",
    4: "Running Subsequences",
    -99: "Account Suspended",
    -1: "Accounts Unhealthy",
    -2: "Bounce Protect",
}

LEAD_STATUS = {
    1: "Active",
    2: "Paused",
    3: "Completed",
    -1: "Bounced",
    -2: "Unsubscribed",
    -3: "Skipped",
}

LEAD_INTEREST_STATUS = {
    0: "Out of Office",
    1: "Interested",
    2: "Meeting Booked",
    3: "Meeting Completed",
    4: "Closed",
    -1: "Not Interested",
    -2: "Wrong Person",
    -3: "Lost",
}

LEAD_VERIFICATION_STATUS = {
    1: "Verified",
    11: "Pending",
    12: "Pending Verification Job",
    -1: "Invalid",
    -2: "Risky",
    -3: "Catch All",
    -4: "Job Change",
}

LEAD_ENRICHMENT_STATUS = {
    1: "Enriched",
    11: "Pending",
    -1: "Enrichment data not available",
    -2: "Error",
}

LEAD_UPLOAD_METHOD = {
    1: "Manual",
    2: "API",
    3: "Webhook",
}

LEAD_ESP_CODE = {
    0: "In Queue",
    1: "Google",
    2: "Microsoft",
    3: "Zoho",
    9: "Yahoo",
    10: "Yandex",
    12: "Web.de",
    13: "Libero.it",
    999: "Other",
    1000: "Not Found",
}

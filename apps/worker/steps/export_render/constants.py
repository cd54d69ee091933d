"""
Shared section labels and layout constants for discharge summary rendering.
"""
from __future__ import annotations

import re

TITLE = "DISCHARGE SUMMARY"
AMA_BANNER = "DISCHARGE AGAINST MEDICAL ADVICE"
FINAL_DIAGNOSIS = "FINAL DIAGNOSIS:"
CLINICAL_PRESENTATION = "CLINICAL PRESENTATION:"
INVESTIGATIONS = "INVESTIGATIONS:"
INVESTIGATIONS_CONTINUED = "INVESTIGATIONS (Continued):"
TREATMENT_GIVEN = "TREATMENT GIVEN:"
HOSPITAL_COURSE = "COURSE IN THE HOSPITAL/SURGICAL PROCEDURE:"
DISCHARGE_ADVICE = "ADVISE ON DISCHARGE:"
FOLLOW_UP = "NEXT FOLLOW UP :"
SIGNATURE = "Consultant Name and Signature"

DEFAULT_PATIENT_LABEL = "Patient"
EXPORT_SUFFIX = "_Discharge_Summary"

# Longest run of text placed in one preview table row.
CHUNK_CHARS = 600

ISO_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})")
UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')

# Hex colours shared by both surfaces.
CATEGORY_SHADE = "F3F4F6"
AMA_SHADE = "FDE047"
DOSAGE_GREY = "4B5563"

"""
MediaPipe Face Mesh (468-point) indices and eye-contact thresholds.
"""

LEFT_EYE_OUTER_INDEX = 33
RIGHT_EYE_OUTER_INDEX = 263
NOSE_TIP_INDEX = 1

# Horizontal nose offset from the eye midpoint, in source pixels.
# Not normalised by face width.
FACING_THRESHOLD_PX = 20.0

SUMMARY_LABELS = (
    (70, "Excellent"),
    (50, "Good"),
    (30, "Fair"),
)
FALLBACK_LABEL = "Poor"

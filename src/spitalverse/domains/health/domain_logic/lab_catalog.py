"""Reference catalogue of common lab tests (German/EU adult reference ranges)."""

from __future__ import annotations

from dataclasses import dataclass

from spitalverse.core.storage.models import LabValue, ReferenceRange


@dataclass(frozen=True)
class LabTest:
    """A catalogue entry. Ranges are checked here, where they are defined."""

    name: str
    unit: str
    normal_range: ReferenceRange

    def __post_init__(self) -> None:
        if self.normal_range.min > self.normal_range.max:
            raise ValueError(
                f"Reference range for {self.name} has min {self.normal_range.min} "
                f"above max {self.normal_range.max}"
            )


@dataclass(frozen=True)
class LabCategory:
    key: str
    name: str
    tests: tuple[LabTest, ...]


def _t(name: str, unit: str, lo: float, hi: float) -> LabTest:
    return LabTest(name=name, unit=unit, normal_range=ReferenceRange(min=lo, max=hi))


LAB_CATEGORIES: tuple[LabCategory, ...] = (
    LabCategory("cbc", "Complete Blood Count (CBC)", (
        _t("Hemoglobin", "g/dL", 12.0, 17.5),
        _t("RBC Count", "10⁶/µL", 4.3, 5.9),
        _t("WBC Count", "10³/µL", 4.0, 10.0),
        _t("Platelets", "10³/µL", 150, 400),
        _t("Hematocrit", "%", 40, 52),
        _t("MCV", "fL", 80, 96),
        _t("MCH", "pg", 27, 33),
        _t("MCHC", "g/dL", 32, 36),
    )),
    LabCategory("diabetes", "Blood Sugar Profile", (
        _t("Fasting Blood Glucose", "mg/dL", 70, 99),
        _t("Random Blood Glucose", "mg/dL", 70, 140),
        _t("HbA1c", "%", 4.0, 5.6),
        _t("HbA1c (IFCC)", "mmol/mol", 20, 38),
    )),
    LabCategory("lipid", "Lipid Profile", (
        _t("Total Cholesterol", "mg/dL", 0, 200),
        _t("HDL Cholesterol", "mg/dL", 40, 100),
        _t("LDL Cholesterol", "mg/dL", 0, 130),
        _t("Triglycerides", "mg/dL", 0, 150),
    )),
    LabCategory("thyroid", "Thyroid Profile", (
        _t("TSH", "mIU/L", 0.4, 4.0),
        _t("Free T3 (fT3)", "pg/mL", 2.0, 4.4),
        _t("Free T4 (fT4)", "ng/dL", 0.9, 1.7),
    )),
    LabCategory("vitamins", "Vitamins & Minerals", (
        _t("Vitamin D (25-OH)", "ng/mL", 30, 100),
        _t("Vitamin B12", "pg/mL", 200, 900),
        _t("Calcium", "mmol/L", 2.2, 2.6),
        _t("Iron (Serum)", "µg/dL", 60, 170),
        _t("Ferritin", "ng/mL", 15, 400),
    )),
    LabCategory("kidney", "Kidney Function (KFT)", (
        _t("Creatinine", "mg/dL", 0.6, 1.2),
        _t("Urea", "mg/dL", 10, 50),
        _t("Uric Acid", "mg/dL", 2.4, 7.0),
        _t("Sodium (Na⁺)", "mmol/L", 135, 145),
        _t("Potassium (K⁺)", "mmol/L", 3.5, 5.1),
    )),
    LabCategory("liver", "Liver Function (LFT)", (
        _t("ALT (GPT)", "U/L", 0, 50),
        _t("AST (GOT)", "U/L", 0, 50),
        _t("Alkaline Phosphatase", "U/L", 40, 130),
        _t("Total Bilirubin", "mg/dL", 0.2, 1.2),
        _t("Albumin", "g/dL", 3.5, 5.0),
    )),
    LabCategory("inflammation", "Inflammation Markers", (
        _t("CRP", "mg/L", 0, 5),
        _t("ESR", "mm/hr", 0, 20),
    )),
)

POPULAR_TEST_NAMES: tuple[str, ...] = (
    "Hemoglobin",
    "Fasting Blood Glucose",
    "HbA1c",
    "Total Cholesterol",
    "TSH",
    "Vitamin D (25-OH)",
    "Creatinine",
    "ALT (GPT)",
)

_BY_NAME: dict[str, LabTest] = {
    test.name: test for category in LAB_CATEGORIES for test in category.tests
}


def find_test(name: str) -> LabTest | None:
    """Exact-name catalogue lookup."""
    return _BY_NAME.get(name)


def popular_tests() -> list[LabTest]:
    return [_BY_NAME[name] for name in POPULAR_TEST_NAMES]


def search_tests(query: str) -> list[LabTest]:
    """Case-insensitive substring search over test names, catalogue order."""
    needle = query.strip().lower()
    if not needle:
        return []
    return [test for test in _BY_NAME.values() if needle in test.name.lower()]


# ---------------------------------------------------------------------------
# Interpretation hints shown next to abnormal values
# ---------------------------------------------------------------------------

# name -> (hint when low, hint when high)
LAB_VALUE_HINTS: dict[str, tuple[str, str]] = {
    "Hemoglobin": (
        "Low hemoglobin may indicate anemia. Consider iron-rich foods like spinach and red meat.",
        "Elevated hemoglobin. Stay hydrated and consult your physician.",
    ),
    "Fasting Blood Glucose": (
        "Blood sugar is low. Ensure regular meals and monitor for hypoglycemia symptoms.",
        "Elevated blood sugar (prediabetic range). Consider dietary changes and consult your doctor.",
    ),
    "HbA1c": (
        "Low HbA1c is generally not a concern.",
        "Elevated HbA1c indicates poor blood sugar control. Discuss diabetes management with your doctor.",
    ),
    "Total Cholesterol": (
        "Low cholesterol is generally not a concern.",
        "Elevated cholesterol. Consider a heart-healthy diet low in saturated fats.",
    ),
    "LDL Cholesterol": (
        "Low LDL cholesterol is desirable.",
        'High LDL ("bad" cholesterol). Increase fiber intake and consider statin therapy consultation.',
    ),
    "HDL Cholesterol": (
        'Low HDL ("good" cholesterol). Increase physical activity and omega-3 fatty acids.',
        "High HDL is generally protective for heart health.",
    ),
    "Triglycerides": (
        "Low triglycerides are not usually a concern.",
        "Elevated triglycerides. Reduce sugar and refined carbohydrate intake.",
    ),
    "Vitamin D (25-OH)": (
        "Vitamin D deficiency. Consider supplementation (60,000 IU weekly) or increased sun exposure.",
        "High Vitamin D levels. Review any supplements with your doctor.",
    ),
    "Vitamin B12": (
        "Vitamin B12 deficiency. Consider B12 supplements or fortified foods.",
        "High B12 is usually not harmful. Discuss with your doctor if concerned.",
    ),
    "TSH": (
        "Low TSH may indicate hyperthyroidism. Consult an endocrinologist for evaluation.",
        "Elevated TSH may indicate hypothyroidism. Thyroid hormone replacement may be needed.",
    ),
    "Creatinine": (
        "Low creatinine is usually not a concern.",
        "Elevated creatinine may indicate kidney function issues. Stay hydrated and consult your doctor.",
    ),
    "ALT (GPT)": (
        "Low ALT is not usually a concern.",
        "Elevated ALT may indicate liver stress. Limit alcohol and consult your doctor.",
    ),
    "AST (GOT)": (
        "Low AST is not usually a concern.",
        "Elevated AST may indicate liver or muscle damage. Medical evaluation recommended.",
    ),
    "CRP": (
        "Low CRP indicates minimal inflammation.",
        "Elevated CRP indicates inflammation in the body. Further investigation may be needed.",
    ),
    "Iron (Serum)": (
        "Low iron may indicate iron deficiency. Consider iron-rich foods or supplements.",
        "High iron levels. May need further testing for hemochromatosis.",
    ),
    "Ferritin": (
        "Low ferritin indicates depleted iron stores. Iron supplementation may be needed.",
        "Elevated ferritin may indicate iron overload or inflammation.",
    ),
}


def suggestion_for(value: LabValue) -> str | None:
    """Hint for an abnormal stored value; None for normal or unknown tests."""
    hints = LAB_VALUE_HINTS.get(value.name)
    if hints is None:
        return None
    if value.trend == "down":
        return hints[0]
    if value.trend == "up":
        return hints[1]
    return None

# service/presentation.py
# Display helpers shared by the Streamlit app and the assistant.

from datetime import date, timedelta
from typing import Optional

from btp.config import RISK_HIGH_PERCENT, RISK_MEDIUM_PERCENT
from btp.schemas import EstimationResult, Schedule

CURRENCY_SUFFIX = {
    "XOF": "F CFA",
    "XAF": "F CFA",
    "EUR": "€",
}


def format_currency(amount: float, currency: str = "XOF") -> str:
    """French-style amount: no decimals, narrow no-break space between thousands."""
    if amount is None:
        return "—"
    value = int(round(amount))
    digits = f"{abs(value):,}".replace(",", "\u202f")
    sign = "-" if value < 0 else ""
    suffix = CURRENCY_SUFFIX.get(currency.upper(), currency.upper())
    return f"{sign}{digits}\u00a0{suffix}"


def derive_schedule(
    duration_days: int,
    today: Optional[date] = None,
    lead_days: int = 30,
) -> Schedule:
    """Start after a fixed lead time, end after the estimated duration."""
    today = today or date.today()
    start = today + timedelta(days=lead_days)
    end = start + timedelta(days=int(duration_days))
    return Schedule(start_date=start, end_date=end, duration_days=int(duration_days))


def risk_level(percent: float) -> str:
    if percent > RISK_HIGH_PERCENT:
        return "high"
    if percent > RISK_MEDIUM_PERCENT:
        return "medium"
    return "low"


def format_estimate_message(
    project_type: str,
    result: EstimationResult,
    currency: str = "XOF",
) -> str:
    """Markdown summary of an estimate, as posted by the assistant."""
    lines = [
        f"🎯 **Estimation IA pour votre projet {project_type}**",
        "",
        "📊 **Résultats :**",
        f"• **Coût total estimé :** {format_currency(result.total_cost, currency)}",
        f"• **Durée estimée :** {result.duration_estimate_days} jours",
        f"• **Matériaux :** {format_currency(result.materials_cost_estimate, currency)}",
        f"• **Main d'œuvre :** {format_currency(result.labor_cost_estimate, currency)}",
        "",
        f"⚠️ **Risque de retard :** {result.delay_risk_percent}%",
    ]
    if result.recommendations:
        lines += ["", "💡 **Recommandations :**"]
        lines += [f"• {rec}" for rec in result.recommendations]
    lines += [
        "",
        "Voulez-vous que j'ajuste certains paramètres ou que je vous aide avec autre chose ?",
    ]
    return "\n".join(lines)

# service/assistant.py
# Rule-based conversational front-end over the estimator.

import random
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

import structlog

from btp.config import (
    CHAT_MAX_RAIN_DAYS,
    CHAT_MAX_SURFACE_M2,
    CHAT_MAX_WORKERS,
    CHAT_TEMPERATURE_RANGE_C,
)
from btp.errors import InsufficientDataError
from btp.estimator import estimate
from btp.ingest import parse_historical_table
from btp.schemas import EstimationRequest, EstimationResult, EstimatorOptions
from btp.stats import summarize_history
from btp.store import HistoricalStore
from service.presentation import format_currency, format_estimate_message

logger = structlog.get_logger()

# Keyword -> project type, checked in this order.
TYPE_KEYWORDS = [
    ("résidentiel", ["résidentiel", "residentiel", "maison", "appartement", "villa"]),
    ("commercial", ["commercial", "bureau", "magasin", "restaurant"]),
    ("industriel", ["industriel", "usine", "entrepôt", "entrepot", "atelier"]),
]

SURFACE_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s*(?:m²|m2|mètres carrés|metres carres)", re.I)
WORKERS_RE = re.compile(r"(\d+)\s*(?:ouvriers|travailleurs|employés|employes)", re.I)
TEMPERATURE_RE = re.compile(r"(-?\d+(?:[.,]\d+)?)\s*(?:°\s*c?|degrés|degres)", re.I)
RAIN_RE = re.compile(r"(\d+)\s*jours?\s+de\s+pluie", re.I)

USER_NAME_PATTERNS = [
    re.compile(r"je m'appelle\s+(\w+)", re.I),
    re.compile(r"mon nom est\s+(\w+)", re.I),
    re.compile(r"appelle-moi\s+(\w+)", re.I),
    # capitalised only, so "je suis intéressé" is not taken for a name
    re.compile(r"[Jj]e suis\s+([A-ZÀ-Ý]\w+)"),
]
ASSISTANT_RENAME_RE = re.compile(r"(?:appelle-toi|je t'appelle(?:rai)?)\s+(.+)", re.I)
WEATHER_CITY_RES = [
    re.compile(r"(?:à|pour|dans)\s+(\w+)", re.I),
    re.compile(r"météo\s+(\w+)", re.I),
]
IA_RE = re.compile(r"\bia\b")
MAX_NUMBER_CHARS = 12

QUESTION_WORDS = [
    "quoi", "comment", "pourquoi", "quand", "où", "qui", "combien", "quel", "quelle",
]

JOKES = [
    "Pourquoi les architectes sont-ils toujours stressés ? Parce qu'ils ont trop de projets en cours ! 😄",
    "Qu'est-ce qu'un maçon qui ne travaille pas ? Un maçon qui ne maçonne pas ! 😂",
    "Comment appelle-t-on un électricien qui ne travaille pas ? Un électricien qui ne s'électrise pas ! ⚡",
]

SEARCH_ANSWERS = {
    "météo": "🌤️ D'après mes sources, il fait actuellement 25°C avec un ciel partiellement nuageux. Parfait pour les travaux extérieurs !",
    "prix matériaux": "💰 Les prix des matériaux varient selon la région. En général, comptez entre 50 000 et 100 000 FCFA/m² pour les matériaux de base.",
    "tendances construction": "🏗️ Les tendances actuelles privilégient l'éco-construction, les matériaux durables et l'efficacité énergétique.",
    "réglementation": "📋 La réglementation BTP évolue régulièrement. Je recommande de consulter les services d'urbanisme locaux pour les dernières normes.",
}
SEARCH_MISS = "🔍 Je n'ai pas trouvé d'information récente sur ce sujet. Voulez-vous que je cherche autre chose ?"

IMPORT_FORMAT = (
    "Type de chantier, Surface (m²), Nombre d'ouvriers, Température (°C), Jours de pluie, "
    "Coût matériaux (FCFA), Coût main d'œuvre (FCFA), Durée estimée (jours), Retards (jours)"
)

HELP_COMMANDS = """💡 **Commandes spéciales :**
• "entraîner" - Améliorez mes connaissances
• "statistiques" - Voir mes données d'apprentissage
• "appelle-toi [nom]" - Changez mon nom
• "météo" - Prévisions météo
• "blague" - Une petite dose d'humour
• "qui es-tu" - En savoir plus sur moi"""


def _has_any(text: str, phrases: List[str]) -> bool:
    return any(p in text for p in phrases)


def _suffix(name: str) -> str:
    return f" {name}" if name else ""


def _to_number(raw: str) -> float:
    return float(raw.replace(",", "."))


def extract_project_info(text: str) -> Dict[str, float]:
    """Pull project type, surface, workers, temperature and rain days out of free text."""
    lower = text.lower()
    info: Dict[str, float] = {}

    for project_type, keywords in TYPE_KEYWORDS:
        if _has_any(lower, keywords):
            info["project_type"] = project_type
            break

    numeric = [
        ("surface_area", SURFACE_RE, _to_number, 0, CHAT_MAX_SURFACE_M2),
        ("worker_count", WORKERS_RE, int, 0, CHAT_MAX_WORKERS),
        ("average_temperature", TEMPERATURE_RE, _to_number, *CHAT_TEMPERATURE_RANGE_C),
        ("rain_days", RAIN_RE, int, 0, CHAT_MAX_RAIN_DAYS),
    ]
    for key, pattern, cast, low, high in numeric:
        match = pattern.search(text)
        if not match:
            continue
        raw = match.group(1)
        # int() refuses very long digit strings, so bound the length first
        if len(raw) <= MAX_NUMBER_CHARS and low <= cast(raw) <= high:
            info[key] = cast(raw)
        else:
            logger.info("assistant_value_ignored", field=key, chars=len(raw))

    return info


def extract_user_name(text: str) -> Optional[str]:
    for pattern in USER_NAME_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def search_answer(query: str) -> str:
    """Canned answers standing in for a web search."""
    return SEARCH_ANSWERS.get(query.strip().lower(), SEARCH_MISS)


@dataclass
class ProjectDraft:
    """Project details gathered across messages."""

    project_type: Optional[str] = None
    surface_area: Optional[float] = None
    worker_count: Optional[int] = None
    average_temperature: float = 25
    rain_days: float = 0
    workers_unknown: bool = False

    def update(self, info: Dict[str, float]) -> None:
        for key, value in info.items():
            setattr(self, key, value)

    @property
    def is_complete(self) -> bool:
        return bool(
            self.project_type
            and self.surface_area
            and (self.worker_count or self.workers_unknown)
        )

    def to_request(self) -> EstimationRequest:
        return EstimationRequest(
            project_type=self.project_type,
            surface_area=self.surface_area,
            worker_count=self.worker_count or 0,
            average_temperature=self.average_temperature,
            rain_days=self.rain_days,
        )


@dataclass
class Conversation:
    """Per-user state of one chat session."""

    assistant_name: str = "Marydahh"
    user_name: str = ""
    message_count: int = 0
    last_visit: Optional[datetime] = None
    training_mode: bool = False
    draft: ProjectDraft = field(default_factory=ProjectDraft)


@dataclass
class Reply:
    text: str
    rule: str = ""
    estimate: Optional[EstimationResult] = None
    show_upload: bool = False


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: Callable[[str, str, Conversation], bool]
    respond: Callable[[str, str, Conversation], Reply]


class Assistant:
    """
    Answers chat messages with an ordered table of (predicate, responder)
    rules. Rules are tried top to bottom against the raw text, its lower-cased
    form and the conversation; the first match produces the reply.
    """

    def __init__(
        self,
        store: HistoricalStore,
        options: Optional[EstimatorOptions] = None,
        rng: Optional[random.Random] = None,
        currency: str = "XOF",
    ):
        self.store = store
        self.options = options or EstimatorOptions.simple()
        self.rng = rng or random.Random()
        self.currency = currency
        self.rules: List[Rule] = self._build_rules()

    def _build_rules(self) -> List[Rule]:
        return [
            Rule("introduce", self._is_introduction, self._introduce),
            Rule("project_details", self._has_project_details, self._project_details),
            Rule("greeting", lambda t, l, c: _has_any(l, ["bonjour", "salut"]), self._greeting),
            Rule("evening", lambda t, l, c: _has_any(l, ["bonsoir", "bonne soirée"]), self._evening),
            Rule(
                "how_are_you",
                lambda t, l, c: _has_any(l, ["comment tu vas", "ça va", "comment allez-vous"]),
                self._how_are_you,
            ),
            Rule("thanks", lambda t, l, c: "merci" in l, self._thanks),
            Rule("good_night", lambda t, l, c: _has_any(l, ["bonne nuit", "dormir"]), self._good_night),
            Rule(
                "farewell",
                lambda t, l, c: _has_any(l, ["au revoir", "bye", "à bientôt"]),
                self._farewell,
            ),
            Rule("joke", lambda t, l, c: _has_any(l, ["blague", "rigoler"]), self._joke),
            Rule("training", lambda t, l, c: _has_any(l, ["entraîner", "entrainer", "apprendre"]), self._training),
            Rule("rename_assistant", lambda t, l, c: ASSISTANT_RENAME_RE.search(t) is not None, self._rename),
            Rule(
                "assistant_name",
                lambda t, l, c: _has_any(l, ["ton nom", "tu t'appelles", "votre nom"]),
                self._assistant_name,
            ),
            Rule("statistics", lambda t, l, c: _has_any(l, ["statistiques", "stats"]), self._statistics),
            Rule("search", self._is_search, self._search),
            Rule("weather", lambda t, l, c: _has_any(l, ["météo", "meteo", "température"]), self._weather),
            Rule("prices", lambda t, l, c: _has_any(l, ["prix", "coût", "tendance"]), self._prices),
            Rule("regulations", lambda t, l, c: _has_any(l, ["règlement", "permis", "norme"]), self._regulations),
            Rule("who_are_you", lambda t, l, c: _has_any(l, ["qui es-tu", "parle-moi de toi"]), self._who_are_you),
            Rule("about_ai", lambda t, l, c: IA_RE.search(l) is not None or "intelligence" in l, self._about_ai),
            Rule("unknown", lambda t, l, c: True, self._unknown),
        ]

    # -- public API -------------------------------------------------------

    def welcome(self, conversation: Conversation, now: Optional[datetime] = None) -> str:
        """Opening message, personalised when the user is already known."""
        now = now or datetime.now()
        if not conversation.user_name:
            return (
                f"Bonjour ! Je suis {conversation.assistant_name}, votre assistante IA "
                "spécialisée en estimation BTP. Que puis-je faire pour vous ? 😊"
            )

        days = (now - conversation.last_visit).days if conversation.last_visit else 0
        name = conversation.user_name
        if days <= 0:
            return (
                f"👋 Bonjour {name} ! Ravi de vous revoir aujourd'hui ! 😊\n\n"
                "Comment puis-je vous aider avec vos projets de construction ?"
            )
        if days == 1:
            return (
                f"👋 Bonjour {name} ! Ça fait plaisir de vous revoir !\n\n"
                "J'espère que vous avez passé une belle journée hier. "
                "Comment puis-je vous aider aujourd'hui ? 😊"
            )
        return (
            f"🌟 Salut {name} ! Ça fait {days} jours qu'on ne s'est pas vus !\n\n"
            "J'ai hâte de vous aider avec vos projets. Que souhaitez-vous faire aujourd'hui ? 😄"
        )

    def respond(
        self,
        conversation: Conversation,
        text: str,
        now: Optional[datetime] = None,
    ) -> Reply:
        """Answer one user message; never raises on user input."""
        text = text.strip()
        conversation.message_count += 1
        conversation.last_visit = now or datetime.now()
        if not text:
            return Reply(text="", rule="empty")

        lower = text.lower()
        for rule in self.rules:
            if rule.predicate(text, lower, conversation):
                reply = rule.respond(text, lower, conversation)
                reply.rule = rule.name
                logger.debug("assistant_rule_matched", rule=rule.name)
                return reply
        return Reply(text="", rule="none")

    def import_text(self, conversation: Conversation, raw_text: str) -> Reply:
        """Merge uploaded training data into the store and report what was learned."""
        new = parse_historical_table(raw_text)
        if not new:
            return Reply(
                rule="import",
                text=(
                    "❌ **Erreur lors de l'entraînement**\n\n"
                    "Je n'ai pas pu extraire de données valides de votre fichier.\n\n"
                    "Vérifiez que le format est correct :\n"
                    "• Type de chantier, Surface, Nombre d'ouvriers, etc.\n"
                    "• Les données sont séparées par des virgules\n"
                    "• La première ligne contient les en-têtes\n\n"
                    "Voulez-vous réessayer avec un autre fichier ?"
                ),
            )

        self.store.merge(new)
        conversation.training_mode = False
        listing = "\n".join(
            f"• {p.project_type} - {p.surface_area:g}m² - {p.estimated_duration_days} jours"
            for p in new
        )
        return Reply(
            rule="import",
            text=(
                "🎉 **Entraînement réussi !**\n\n"
                f"J'ai appris de {len(new)} nouveaux projets. "
                f"Maintenant je connais {len(self.store)} projets au total !\n\n"
                f"📊 **Nouvelles données ajoutées :**\n{listing}\n\n"
                "Maintenant je peux vous donner des estimations plus précises ! Dites-moi votre projet."
            ),
        )

    # -- predicates -------------------------------------------------------

    def _is_introduction(self, text: str, lower: str, conv: Conversation) -> bool:
        return not conv.user_name and extract_user_name(text) is not None

    def _has_project_details(self, text: str, lower: str, conv: Conversation) -> bool:
        info = extract_project_info(text)
        if {"project_type", "surface_area", "worker_count"} & info.keys():
            return True
        draft = conv.draft
        return bool(
            draft.project_type
            and draft.surface_area
            and not draft.worker_count
            and "sais pas" in lower
        )

    def _is_search(self, text: str, lower: str, conv: Conversation) -> bool:
        return _has_any(lower, ["cherche", "recherche", "trouve"]) and bool(self._search_query(text))

    @staticmethod
    def _search_query(text: str) -> str:
        return re.sub(r"recherche|cherche|trouve", "", text, flags=re.I).strip()

    # -- responders -------------------------------------------------------

    def _introduce(self, text: str, lower: str, conv: Conversation) -> Reply:
        conv.user_name = extract_user_name(text)
        return Reply(
            text=(
                f"Enchantée {conv.user_name} ! 😊 C'est un plaisir de faire votre connaissance. "
                f"Je suis {conv.assistant_name}, votre assistante IA. "
                "Comment puis-je vous aider aujourd'hui ?"
            )
        )

    def _project_details(self, text: str, lower: str, conv: Conversation) -> Reply:
        draft = conv.draft
        draft.update(extract_project_info(text))
        if "sais pas" in lower and draft.project_type and draft.surface_area:
            draft.workers_unknown = True

        if not draft.project_type:
            return Reply(
                text=(
                    "Je vois que vous voulez estimer un projet de construction.\n\n"
                    "Pour vous donner une estimation précise, j'ai besoin de savoir "
                    "quel type de projet c'est :\n\n"
                    "🏠 **Résidentiel** (maison, appartement, villa)\n"
                    "🏢 **Commercial** (bureau, magasin, restaurant)\n"
                    "🏭 **Industriel** (usine, entrepôt, atelier)\n\n"
                    f"{HELP_COMMANDS}\n\n"
                    "Pouvez-vous me préciser le type de votre projet ?"
                )
            )
        if not draft.surface_area:
            return Reply(
                text=(
                    f"Parfait ! Un projet {draft.project_type}.\n\n"
                    "Maintenant, j'ai besoin de connaître la surface de votre projet.\n\n"
                    "Quelle est la superficie en m² ? Par exemple :\n"
                    "• 150 m² pour une maison\n"
                    "• 500 m² pour un local commercial\n"
                    "• 1000 m² pour un entrepôt"
                )
            )
        if not draft.is_complete:
            return Reply(
                text=(
                    f"Excellent ! {draft.surface_area:g} m² pour un projet {draft.project_type}.\n\n"
                    "Pour affiner l'estimation, combien d'ouvriers prévoyez-vous sur le chantier ?\n\n"
                    "Typiquement :\n"
                    "• 5-10 ouvriers pour un projet résidentiel\n"
                    "• 10-20 ouvriers pour un projet commercial\n"
                    "• 20+ ouvriers pour un projet industriel\n\n"
                    "Ou dites-moi \"je ne sais pas\" et je ferai une estimation basée sur la surface !"
                )
            )

        try:
            result = estimate(draft.to_request(), self.store.snapshot(), self.options)
        except InsufficientDataError:
            return Reply(
                text=(
                    "📂 Je n'ai encore aucune donnée historique pour faire une estimation.\n\n"
                    "Dites \"entraîner\" pour m'envoyer un fichier de projets."
                ),
                show_upload=True,
            )
        return Reply(
            text=format_estimate_message(draft.project_type, result, self.currency),
            estimate=result,
        )

    def _greeting(self, text: str, lower: str, conv: Conversation) -> Reply:
        name = _suffix(conv.user_name)
        return Reply(
            text=self.rng.choice(
                [
                    f"Bonjour{name} ! Comment allez-vous aujourd'hui ? 😊",
                    f"Salut{name} ! Ravi de vous revoir ! Comment puis-je vous aider ?",
                    f"Hey{name} ! J'espère que vous passez une excellente journée ! ☀️",
                ]
            )
        )

    def _evening(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(text=f"Bonsoir{_suffix(conv.user_name)} ! 😊 Comment puis-je vous aider ce soir ?")

    def _how_are_you(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=(
                "Très bien merci ! 😊 J'ai passé une excellente journée à aider des gens "
                "avec leurs projets de construction. Et vous, comment allez-vous ?"
            )
        )

    def _thanks(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=self.rng.choice(
                [
                    f"De rien{_suffix(conv.user_name)} ! C'est un plaisir de vous aider ! 💝",
                    "Avec plaisir ! N'hésitez pas si vous avez d'autres questions ! 😊",
                    "C'est normal ! Je suis là pour ça ! 💪",
                ]
            )
        )

    def _good_night(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=(
                f"Bonne nuit{_suffix(conv.user_name)} ! 😴 Reposez-vous bien et n'hésitez pas "
                "à revenir demain si vous avez d'autres questions !"
            )
        )

    def _farewell(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=(
                f"Au revoir{_suffix(conv.user_name)} ! 👋 Ça a été un plaisir de discuter avec vous. "
                "Revenez quand vous voulez ! 😊"
            )
        )

    def _joke(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(text=self.rng.choice(JOKES))

    def _training(self, text: str, lower: str, conv: Conversation) -> Reply:
        conv.training_mode = True
        return Reply(
            text=(
                "📚 **Mode Entraînement Activé**\n\n"
                "Pour m'améliorer, j'ai besoin de vos données Excel/CSV.\n\n"
                f"📋 **Format attendu :**\n{IMPORT_FORMAT}\n\n"
                "💡 **Exemple :**\nrésidentiel,150,8,28,5,25000000,15000000,90,5\n\n"
                "Importez votre fichier ci-dessous pour m'entraîner !"
            ),
            show_upload=True,
        )

    def _rename(self, text: str, lower: str, conv: Conversation) -> Reply:
        conv.assistant_name = ASSISTANT_RENAME_RE.search(text).group(1).strip()
        return Reply(
            text=(
                f"😊 Parfait ! Je m'appelle maintenant {conv.assistant_name}.\n\n"
                "Ravi de faire votre connaissance ! Comment puis-je vous aider aujourd'hui ?"
            )
        )

    def _assistant_name(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=(
                f"Je m'appelle {conv.assistant_name} !\n\n"
                "Pour changer mon nom, dites-moi \"appelle-toi [nouveau nom]\"."
            )
        )

    def _statistics(self, text: str, lower: str, conv: Conversation) -> Reply:
        stats = summarize_history(self.store.snapshot())
        if stats is None:
            return Reply(
                text="📊 Je n'ai encore analysé aucun projet. Dites \"entraîner\" pour m'envoyer vos données !"
            )
        lines = "\n".join(
            f"• {project_type} : {type_stats.count} projets"
            for project_type, type_stats in stats.by_type.items()
        )
        return Reply(
            text=(
                "📊 **Mes Statistiques d'Apprentissage**\n\n"
                f"J'ai analysé {stats.total_projects} projets au total :\n\n{lines}\n\n"
                "💰 **Investissement total analysé :** "
                f"{format_currency(stats.total_investment, self.currency)}\n\n"
                "Plus vous m'entraînez, plus mes estimations deviennent précises !"
            )
        )

    def _search(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=(
                f"🔍 **Recherche en cours...**\n\n{search_answer(self._search_query(text))}\n\n"
                "Voulez-vous que je cherche autre chose ?"
            )
        )

    def _weather(self, text: str, lower: str, conv: Conversation) -> Reply:
        if lower.strip() in ("météo", "meteo"):
            return Reply(
                text=(
                    "🌤️ **Météo**\n\nPour quelle ville voulez-vous connaître la météo ?\n"
                    "Dites-moi par exemple : \"météo à Paris\" ou \"météo Dakar\""
                )
            )
        city = "votre région"
        for pattern in WEATHER_CITY_RES:
            match = pattern.search(text)
            if match:
                city = match.group(1)
                break
        return Reply(
            text=(
                f"🌤️ **Météo pour {city}**\n\n"
                "D'après mes sources, il fait actuellement 25°C avec un ciel partiellement nuageux.\n\n"
                "☀️ **Prévisions :**\n"
                "• Aujourd'hui : 25°C, ensoleillé\n"
                "• Demain : 27°C, quelques nuages\n"
                "• Cette semaine : Températures agréables, parfait pour les travaux extérieurs !\n\n"
                "💡 **Conseil chantier :** C'est le moment idéal pour les travaux de maçonnerie "
                "et de peinture extérieure !"
            )
        )

    def _prices(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=(
                f"💰 **Informations sur les prix**\n\n{search_answer('prix matériaux')}\n\n"
                "📈 **Tendances actuelles :**\n"
                "• Hausse modérée des matériaux de base (+5% cette année)\n"
                "• Stabilité des coûts de main d'œuvre\n"
                "• Forte demande pour les matériaux écologiques\n\n"
                "Voulez-vous une estimation spécifique pour votre projet ?"
            )
        )

    def _regulations(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=(
                "📋 **Réglementation BTP**\n\n"
                "🏗️ **Permis de construire :**\n"
                "• Obligatoire pour les projets > 20m²\n"
                "• Délai moyen : 2-3 mois\n"
                "• Documents requis : plans, notice d'impact, etc.\n\n"
                "⚖️ **Normes en vigueur :**\n"
                "• Normes parasismiques selon la zone\n"
                "• Accessibilité PMR obligatoire\n\n"
                "💡 **Conseil :** Consultez votre mairie pour les spécificités locales !"
            )
        )

    def _who_are_you(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=(
                f"😊 **À propos de moi**\n\n"
                f"Je suis {conv.assistant_name}, votre assistante IA spécialisée en construction !\n\n"
                "🏗️ **Mes compétences :**\n"
                "• Estimation des coûts et délais à partir de vos projets passés\n"
                "• Conseils techniques et réglementaires\n"
                "• Conversations amicales et personnalisées\n\n"
                "Et vous, racontez-moi un peu de vous !"
            )
        )

    def _about_ai(self, text: str, lower: str, conv: Conversation) -> Reply:
        return Reply(
            text=(
                "🧠 Je suis une IA spécialisée en construction ! J'apprends grâce aux données "
                "que vous me fournissez. Plus vous m'entraînez, plus je deviens précise dans "
                "mes estimations !"
            )
        )

    def _unknown(self, text: str, lower: str, conv: Conversation) -> Reply:
        words = set(re.findall(r"\w+", lower))
        if words & set(QUESTION_WORDS):
            query = re.sub(r"[^\w\s]", "", text).strip()
            return Reply(
                text=(
                    "🔍 **Recherche en cours...**\n\n"
                    f"D'après mes sources, voici ce que j'ai trouvé :\n\n{search_answer(query)}\n\n"
                    "Si vous avez besoin d'informations plus spécifiques, n'hésitez pas à me le demander !"
                )
            )
        return Reply(
            text=(
                "🤔 C'est une question intéressante !\n\n"
                "Je ne suis pas sûre d'avoir une réponse précise à cette question. "
                "Pouvez-vous me donner plus de détails ou me poser une question différente ?\n\n"
                "💡 **Je peux vous aider avec :**\n"
                "• Estimations de projets de construction\n"
                "• Conseils techniques BTP\n"
                "• Questions générales et conversations amicales\n\n"
                "Que souhaitez-vous savoir ? 😊"
            )
        )

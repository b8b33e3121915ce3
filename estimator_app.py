# estimator_app.py
# Streamlit UI with:
# - Estimation
# - Données (import, template, reset)
# - Statistiques
# - Assistant

import random

import pandas as pd
import streamlit as st

from btp.config import PROJECT_TYPES
from btp.errors import InsufficientDataError, UnsupportedFileError
from btp.ingest import projects_to_frame, template_csv
from btp.log import configure_logging
from btp.schemas import EstimationRequest
from btp.settings import settings
from btp.stats import compare_to_history, stats_by_type_df, summarize_history
from btp.store import default_store
from service.assistant import Assistant, Conversation
from service.estimate_lib import estimate_requests_df, estimate_with_store, import_file
from service.presentation import derive_schedule, format_currency, risk_level

RISK_LABELS = {
    "high": "Élevé",
    "medium": "Modéré",
    "low": "Faible",
}

COMPARISON_LABELS = {
    "longer": "Plus long",
    "shorter": "Plus court",
}

PROJECT_TYPE_LABELS = {
    "résidentiel": "🏠 Résidentiel",
    "commercial": "🏢 Commercial",
    "industriel": "🏭 Industriel",
}

HISTORY_COLUMN_LABELS = {
    "project_type": "Type",
    "surface_area": "Surface (m²)",
    "worker_count": "Ouvriers",
    "average_temperature": "Température (°C)",
    "rain_days": "Jours de pluie",
    "materials_cost": "Coût matériaux",
    "labor_cost": "Coût main d'œuvre",
    "estimated_duration_days": "Durée (jours)",
    "delay_days": "Retards (jours)",
}


def fmt_money(x) -> str:
    if x is None or pd.isna(x):
        return "—"
    return format_currency(x, settings.currency)


def _init_state():
    """Session-scoped store, assistant and conversation, created once per browser session."""
    if "store" not in st.session_state:
        configure_logging(settings.log_level, settings.log_json)
        st.session_state["store"] = default_store(seed=settings.seed_samples)
    if "assistant" not in st.session_state:
        st.session_state["assistant"] = Assistant(
            st.session_state["store"],
            options=settings.estimator_options(),
            rng=random.Random(),
            currency=settings.currency,
        )
    if "conversation" not in st.session_state:
        conversation = Conversation(assistant_name=settings.assistant_name)
        st.session_state["conversation"] = conversation
        st.session_state["chat"] = [
            {
                "role": "assistant",
                "content": st.session_state["assistant"].welcome(conversation),
            }
        ]


def _rerun_app():
    try:
        st.rerun()
    except AttributeError:
        st.experimental_rerun()


def _render_estimate(result, project_type: str):
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Coût total estimé", fmt_money(result.total_cost))
    with col2:
        st.metric("Durée estimée", f"{result.duration_estimate_days} jours")
    with col3:
        level = risk_level(result.delay_risk_percent)
        st.metric("Risque de retard", f"{result.delay_risk_percent}%", RISK_LABELS[level],
                  delta_color="off")

    st.write(f"**Matériaux :** {fmt_money(result.materials_cost_estimate)}")
    st.write(f"**Main d'œuvre :** {fmt_money(result.labor_cost_estimate)}")

    schedule = derive_schedule(
        result.duration_estimate_days, lead_days=settings.schedule_lead_days
    )
    st.write(
        f"**Planning indicatif :** du {schedule.start_date:%d/%m/%Y} "
        f"au {schedule.end_date:%d/%m/%Y}"
    )

    if result.fallback:
        st.warning(
            f"Aucun projet « {project_type} » dans l'historique : "
            "estimation basée sur l'ensemble des projets."
        )
    elif result.low_confidence:
        st.caption(
            f"Historique limité ({result.sample_size} projet(s) similaire(s)) : "
            "estimation peu fiable."
        )

    if result.recommendations:
        st.subheader("Recommandations")
        for rec in result.recommendations:
            st.write(f"• {rec}")


def main():
    st.set_page_config(page_title="Estimateur BTP", layout="wide")
    st.title("Estimateur BTP")

    _init_state()
    store = st.session_state["store"]
    options = settings.estimator_options()

    tab_estimate, tab_data, tab_stats, tab_chat = st.tabs(
        [
            "Estimation",
            "Données",
            "Statistiques",
            "Assistant",
        ]
    )

    # Estimation tab: single project form + batch CSV
    with tab_estimate:
        st.header("Estimer un projet")
        st.caption(f"{len(store)} projets dans l'historique.")

        with st.form("estimate_form"):
            project_type = st.selectbox(
                "Type de projet",
                PROJECT_TYPES,
                format_func=lambda t: PROJECT_TYPE_LABELS.get(t, t),
            )
            col_a, col_b = st.columns(2)
            with col_a:
                surface_area = st.number_input(
                    "Surface (m²)", min_value=0.0, value=150.0, step=10.0
                )
                worker_count = st.number_input(
                    "Nombre d'ouvriers", min_value=0, value=8, step=1
                )
            with col_b:
                average_temperature = st.number_input(
                    "Température moyenne (°C)", value=25.0, step=1.0
                )
                rain_days = st.number_input(
                    "Jours de pluie prévus", min_value=0, value=5, step=1
                )
            submitted = st.form_submit_button("Estimer")

        if submitted:
            request = EstimationRequest(
                project_type=project_type,
                surface_area=surface_area,
                worker_count=int(worker_count),
                average_temperature=average_temperature,
                rain_days=rain_days,
            )
            try:
                result = estimate_with_store(request, store, options)
            except InsufficientDataError:
                st.error(
                    "Aucune donnée historique. Importez des projets dans l'onglet Données."
                )
            else:
                st.session_state["last_estimate"] = result
                _render_estimate(result, project_type)

        st.markdown("---")

        with st.expander("Estimation par lot (CSV)", expanded=False):
            st.markdown(
                "Colonnes acceptées : `type, surface, ouvriers, temperature, pluie` "
                "(ou leurs noms canoniques)."
            )
            uploaded = st.file_uploader(
                "Fichier de projets à estimer", type=["csv"], key="batch_uploader"
            )
            if uploaded is not None:
                df_in = pd.read_csv(uploaded)
                st.subheader("Aperçu")
                st.dataframe(df_in.head())

                if st.button("Estimer toutes les lignes"):
                    if not len(store):
                        st.error("Aucune donnée historique.")
                    else:
                        df_out = estimate_requests_df(df_in, store.snapshot(), options)
                        st.dataframe(df_out.head())
                        st.download_button(
                            label="Télécharger les estimations",
                            data=df_out.to_csv(index=False).encode("utf-8"),
                            file_name="estimations_btp.csv",
                            mime="text/csv",
                        )

    # Données tab: import, template, reset
    with tab_data:
        st.header("Données historiques")

        st.markdown(
            "Importez un export CSV ou Excel de vos projets terminés. "
            "Les lignes sans type ou avec une surface nulle sont ignorées."
        )

        st.download_button(
            label="Télécharger le modèle CSV",
            data=template_csv().encode("utf-8"),
            file_name="modele_projets_btp.csv",
            mime="text/csv",
        )

        uploaded_file = st.file_uploader(
            "Fichier de projets (CSV, TXT, XLSX)",
            type=["csv", "txt", "xlsx"],
            key="history_uploader",
        )
        if uploaded_file is not None and st.button("Ajouter à l'historique"):
            try:
                added, total = import_file(store, uploaded_file, uploaded_file.name)
            except UnsupportedFileError as exc:
                st.error(exc.message)
            else:
                if added:
                    st.success(f"{added} projets importés ({total} au total).")
                else:
                    st.warning("Aucune ligne valide trouvée dans ce fichier.")

        df_hist = projects_to_frame(list(store.snapshot()))
        st.subheader(f"Projets : {len(df_hist)}")
        st.dataframe(df_hist.rename(columns=HISTORY_COLUMN_LABELS).head(50))

        with st.expander("Réinitialiser", expanded=False):
            if st.button("Revenir aux projets d'exemple"):
                store.seed_samples()
                st.success("Historique réinitialisé.")
                _rerun_app()

    # Statistiques tab
    with tab_stats:
        st.header("Statistiques")

        stats = summarize_history(store.snapshot())
        if stats is None:
            st.info("Aucune donnée. Importez des projets dans l'onglet Données.")
        else:
            col1, col2, col3, col4 = st.columns(4)
            with col1:
                st.metric("Projets analysés", f"{stats.total_projects}")
            with col2:
                st.metric("Investissement total", fmt_money(stats.total_investment))
            with col3:
                st.metric("Durée moyenne", f"{stats.average_duration_days} jours")
            with col4:
                st.metric("Retard moyen", f"{stats.average_delay_days} jours")

            df_types = stats_by_type_df(stats)
            st.subheader("Par type de projet")
            st.dataframe(
                df_types.rename(
                    columns={
                        "count": "Projets",
                        "total_cost": "Coût total",
                        "average_duration_days": "Durée moyenne",
                        "average_delay_days": "Retard moyen",
                    }
                )
            )
            st.bar_chart(df_types.set_index("Type")["count"])

            last = st.session_state.get("last_estimate")
            if last is not None:
                comparison = compare_to_history(last, stats)
                st.subheader("Dernière estimation")
                st.write(
                    f"Durée estimée : {last.duration_estimate_days} jours, soit "
                    f"{comparison['duration_ratio_pct']:.0f}% de la durée moyenne "
                    f"({COMPARISON_LABELS[comparison['label']]})"
                )

    # Assistant tab: chat
    with tab_chat:
        assistant = st.session_state["assistant"]
        conversation = st.session_state["conversation"]
        st.header(f"Assistant {conversation.assistant_name}")

        for message in st.session_state["chat"]:
            with st.chat_message(message["role"]):
                st.markdown(message["content"])

        if conversation.training_mode:
            training_file = st.file_uploader(
                "Données d'entraînement (CSV)",
                type=["csv", "txt"],
                key="training_uploader",
            )
            if training_file is not None and st.button("Entraîner l'assistant"):
                raw_text = training_file.getvalue().decode("utf-8-sig", errors="replace")
                reply = assistant.import_text(conversation, raw_text)
                st.session_state["chat"].append(
                    {"role": "assistant", "content": reply.text}
                )
                _rerun_app()

        prompt = st.chat_input("Votre message")
        if prompt:
            reply = assistant.respond(conversation, prompt)
            st.session_state["chat"].append({"role": "user", "content": prompt})
            if reply.text:
                st.session_state["chat"].append(
                    {"role": "assistant", "content": reply.text}
                )
            _rerun_app()


if __name__ == "__main__":
    main()

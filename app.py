"""FitCoach - Streamlit App."""

import logging
import time

import streamlit as st
from pydantic import ValidationError

from fitcoach.config import AppConfig, build_store
from fitcoach.controller import AppController
from fitcoach.errors import FitCoachError
from fitcoach.memory.kv_store import KeyValueStore
from fitcoach.memory.plan_repository import PlanRepository
from fitcoach.memory.profile_store import ProfileStore
from fitcoach.models.diet_plan import MealPlan
from fitcoach.models.user_profile import ActivityLevel, FitnessGoal, Gender
from fitcoach.services.calories import bmi_category, body_mass_index, healthy_weight_range
from fitcoach.services.workouts import PLAN_DURATIONS
from fitcoach.utils.identity import LocalIdentityProvider
from fitcoach.utils.secure_storage import SecureSessionStorage

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="FitCoach",
    page_icon="🏋️",
    layout="wide",
    initial_sidebar_state="collapsed",
)

TREND_ICONS = {"up": "📈", "down": "📉", "same": "➖"}


@st.cache_resource
def get_config() -> AppConfig:
    """Read settings from secrets, falling back to environment and defaults."""
    try:
        config = AppConfig.from_secrets(st.secrets)
    except FileNotFoundError:
        config = AppConfig.from_secrets()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return config


@st.cache_resource
def get_store() -> KeyValueStore:
    """Store shared by every browser session of this server."""
    return build_store(get_config())


def get_session_storage() -> SecureSessionStorage:
    if "session_storage" not in st.session_state:
        config = get_config()
        st.session_state.session_storage = SecureSessionStorage(
            encryption_key=config.session_encryption_key(),
            cookie_name=config.cookie_name,
            expiry_days=config.cookie_expiry_days,
        )
    return st.session_state.session_storage


def initialize_session_state() -> None:
    """Create the per-browser controller on first run."""
    if "controller" not in st.session_state:
        config = get_config()
        store = get_store()
        identity = LocalIdentityProvider(store, min_password_length=config.min_password_length)
        st.session_state.controller = AppController(
            identity=identity,
            profiles=ProfileStore(store),
            plans=PlanRepository(store),
        )
    if "cookie_save_pending" not in st.session_state:
        st.session_state.cookie_save_pending = False


def get_controller() -> AppController:
    return st.session_state.controller


def restore_session_from_cookie() -> bool:
    """
    Try to restore the signed-in account from the session cookie.

    Returns:
        True if session was restored, False otherwise
    """
    controller = get_controller()
    if controller.session.is_authenticated:
        return True

    storage = get_session_storage()
    if not storage.is_ready():
        return False

    saved = storage.load_session()
    if not saved or "uid" not in saved:
        return False

    identity = controller.identity
    if isinstance(identity, LocalIdentityProvider) and identity.resume(saved["uid"]):
        logger.info(f"Restored session from cookie for {saved.get('email')}")
        return True

    storage.clear_session()
    return False


def logout() -> None:
    """Sign out and forget the session cookie."""
    get_session_storage().clear_session()
    get_controller().sign_out()
    logger.info("User logged out")
    st.rerun()


def show_error(error: Exception) -> None:
    if isinstance(error, ValidationError):
        for problem in error.errors():
            field = ".".join(str(part) for part in problem["loc"])
            st.error(f"{field}: {problem['msg']}")
    else:
        st.error(str(error))


def login_page() -> None:
    """Display sign-in and sign-up forms."""
    st.title("🏋️ FitCoach")
    st.markdown("### Personalized diet and workout plans")

    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        sign_in_tab, sign_up_tab = st.tabs(["Sign in", "Create account"])

        with sign_in_tab:
            with st.form("sign_in"):
                email = st.text_input("Email")
                password = st.text_input("Password", type="password")
                submitted = st.form_submit_button("Sign in", type="primary", use_container_width=True)
            if submitted:
                try:
                    get_controller().sign_in(email, password)
                    st.session_state.cookie_save_pending = True
                    st.rerun()
                except FitCoachError as e:
                    show_error(e)

        with sign_up_tab:
            with st.form("sign_up"):
                email = st.text_input("Email")
                password = st.text_input("Password", type="password")
                confirm = st.text_input("Confirm password", type="password")
                submitted = st.form_submit_button("Create account", type="primary", use_container_width=True)
            if submitted:
                try:
                    get_controller().sign_up(email, password, confirm)
                    st.session_state.cookie_save_pending = True
                    st.rerun()
                except FitCoachError as e:
                    show_error(e)


def render_meal(label: str, meal: MealPlan) -> None:
    with st.expander(f"**{label}:** {meal.name} ({meal.calories} cal)"):
        st.write(f"Protein {meal.protein} g · Carbs {meal.carbs} g · Fat {meal.fat} g")
        st.write("**Ingredients:** " + ", ".join(meal.ingredients))
        st.write(f"**Instructions:** {meal.instructions}")
        st.write("**Alternatives:** " + ", ".join(meal.alternatives))


def render_dashboard() -> None:
    controller = get_controller()
    profile = controller.session.profile

    st.header(f"Welcome back, {profile.name or 'User'}! 👋")

    tip = controller.session.tip
    if tip:
        col1, col2 = st.columns([5, 1])
        with col1:
            st.info(f"**{tip.tip_type.value.title()} tip:** {tip.content}")
        with col2:
            if st.button("New tip", use_container_width=True):
                controller.refresh_tip()
                st.rerun()

    if not controller.is_profile_complete():
        st.warning(
            "To unlock personalized fitness plans, complete your profile first "
            f"(missing: {', '.join(profile.missing_fields())})."
        )
        return

    goal_col, bmi_col, activity_col, weight_col = st.columns(4)
    goal_col.metric("Goal", (profile.goal_label or "-").title())

    bmi = body_mass_index(profile)
    if bmi is not None:
        low, high = healthy_weight_range(profile.height)
        bmi_col.metric("BMI", f"{bmi:.1f}", bmi_category(bmi), delta_color="off")
        bmi_col.caption(f"Healthy range: {low} kg - {high} kg")
    else:
        bmi_col.metric("BMI", "-")

    activity_col.metric("Activity", profile.activity_level.value.replace("_", " ").title())
    weight_col.metric("Current weight", f"{controller.progress_summary().current_weight} kg")

    diet_col, workout_col = st.columns(2)
    with diet_col:
        st.subheader("🥗 Today's diet plan")
        plan = controller.current_diet_plan()
        if plan:
            st.write(f"**Daily target:** {plan.total_calories} cal")
            for label, meal in (
                ("Breakfast", plan.breakfast),
                ("Lunch", plan.lunch),
                ("Dinner", plan.dinner),
                ("Snack", plan.snacks[0]),
            ):
                st.write(f"**{label}:** {meal.name} ({meal.calories} cal)")
        else:
            st.caption("No diet plan yet. Generate one in the Diet tab.")

    with workout_col:
        st.subheader("💪 Current workout plan")
        plan = controller.current_workout_plan()
        if plan:
            st.write(f"**{plan.workout_type.value.title()}**, {plan.duration_days} days")
            for exercise in plan.exercises:
                st.write(f"- {exercise.name}: {exercise.sets} × {exercise.reps}")
        else:
            st.caption("No workout plan yet. Generate one in the Workout tab.")


def _option_index(options, value) -> int:
    return options.index(value) + 1 if value in options else 0


def render_profile_form() -> None:
    controller = get_controller()
    profile = controller.session.profile

    st.header("👤 Your profile")
    with st.form("profile"):
        name = st.text_input("Name", value=profile.name or "")
        age = st.number_input("Age", min_value=13, max_value=120, value=profile.age, step=1)

        genders = [g.value for g in Gender]
        gender = st.selectbox(
            "Gender", [""] + genders,
            index=_option_index(genders, profile.gender.value if profile.gender else None),
        )
        height = st.number_input(
            "Height (cm)", min_value=100.0, max_value=250.0, value=profile.height, step=1.0
        )
        weight = st.number_input(
            "Weight (kg)", min_value=30.0, max_value=300.0, value=profile.weight, step=0.1
        )

        goals = [g.value for g in FitnessGoal]
        fitness_goal = st.selectbox(
            "Fitness goal", [""] + goals,
            index=_option_index(goals, profile.fitness_goal.value if profile.fitness_goal else None),
            format_func=lambda v: v.replace("_", " ").title() if v else "Select a goal",
        )
        levels = [a.value for a in ActivityLevel]
        activity_level = st.selectbox(
            "Activity level", [""] + levels,
            index=_option_index(levels, profile.activity_level.value if profile.activity_level else None),
            format_func=lambda v: v.replace("_", " ").title() if v else "Select a level",
        )
        submitted = st.form_submit_button("Save profile", type="primary")

    if submitted:
        try:
            controller.update_profile(
                {
                    "name": name,
                    "age": age,
                    "gender": gender,
                    "height": height,
                    "weight": weight,
                    "fitness_goal": fitness_goal,
                    "activity_level": activity_level,
                }
            )
            st.success("Profile saved")
        except (FitCoachError, ValidationError) as e:
            show_error(e)


def render_diet_planner() -> None:
    controller = get_controller()
    st.header("🥗 Diet planner")
    st.caption("Personalized meal plans tailored to your fitness goals")

    if st.button("Generate diet plan", type="primary", disabled=not controller.is_profile_complete()):
        try:
            controller.generate_diet_plan()
        except FitCoachError as e:
            show_error(e)

    plan = controller.current_diet_plan()
    if not plan:
        st.caption("Generate a plan to see your meals.")
        return

    st.metric("Daily calories", plan.total_calories)
    labels = ["Breakfast", "Lunch", "Dinner"] + ["Snack"] * len(plan.snacks)
    for label, meal in zip(labels, plan.meals()):
        render_meal(label, meal)


def render_workout_planner() -> None:
    controller = get_controller()
    st.header("💪 Workout planner")

    col1, col2 = st.columns(2)
    location = col1.radio("Where do you train?", ["home", "gym"], format_func=str.title, horizontal=True)
    duration = col2.radio(
        "Plan length", list(PLAN_DURATIONS), format_func=lambda d: f"{d} days", horizontal=True
    )

    if st.button("Generate workout plan", type="primary", disabled=not controller.is_profile_complete()):
        try:
            controller.generate_workout_plan(location, duration)
        except FitCoachError as e:
            show_error(e)

    plan = controller.current_workout_plan()
    if not plan:
        st.caption("Generate a plan to see your exercises.")
        return

    goal = controller.session.profile.goal_label
    if goal:
        st.caption(f"Personalized for your {goal} goal")
    st.caption(f"{len(plan.exercises)} exercises, {plan.total_sets} sets in total")
    for exercise in plan.exercises:
        with st.expander(f"**{exercise.name}** · {exercise.sets} sets × {exercise.reps}"):
            st.write(exercise.description)
            st.write(f"**Rest:** {exercise.rest_time}")
            st.write("**Muscles:** " + ", ".join(exercise.muscle_groups))
            if exercise.calories_burned:
                st.write(f"**Calories per set:** ~{exercise.calories_burned}")


def render_progress_tracker() -> None:
    controller = get_controller()
    st.header("📊 Progress tracker")

    summary = controller.progress_summary()
    stats_col, chart_col = st.columns([1, 2])

    with stats_col:
        delta = None
        if summary.trend:
            delta = (
                f"{summary.trend.magnitude:.1f} kg"
                if summary.trend.magnitude > 0
                else "No change"
            )
            if summary.trend.direction.value == "down":
                delta = f"-{delta}"
        st.metric("Current weight", f"{summary.current_weight} kg", delta, delta_color="inverse")
        st.write(f"**Goal progress:** {summary.kg_to_go:.1f} kg to go")
        st.progress(int(summary.percent))

        with st.form("log_progress", clear_on_submit=True):
            weight = st.number_input("Weight (kg)", min_value=0.0, step=0.1)
            notes = st.text_input("Notes (optional)", placeholder="How are you feeling today?")
            submitted = st.form_submit_button("Add entry")
        if submitted and weight > 0:
            controller.log_progress(weight, notes)
            st.rerun()

    with chart_col:
        entries = controller.progress_entries()
        if entries:
            st.line_chart(
                [{"date": e.date.strftime("%b %d"), "Weight (kg)": e.weight} for e in entries],
                x="date",
                y="Weight (kg)",
            )
        else:
            st.caption("Start logging your progress to see your chart")

        for row in summary.history:
            line = f"**{row.entry.weight} kg** · {row.entry.date.strftime('%B %d, %Y')}"
            if row.direction is not None:
                line += f" {TREND_ICONS[row.direction.value]} {abs(row.change):.1f} kg"
            st.write(line)
            if row.entry.notes:
                st.caption(row.entry.notes)


def main_app() -> None:
    """Main application UI."""
    controller = get_controller()

    col1, col2 = st.columns([4, 1])
    with col1:
        st.title("🏋️ FitCoach")
    with col2:
        st.caption(controller.session.account.email)
        if st.button("Sign out", use_container_width=True):
            logout()

    dashboard, profile, diet, workout, progress = st.tabs(
        ["Dashboard", "Profile", "Diet", "Workout", "Progress"]
    )
    with dashboard:
        render_dashboard()
    with profile:
        render_profile_form()
    with diet:
        render_diet_planner()
    with workout:
        render_workout_planner()
    with progress:
        render_progress_tracker()


def main() -> None:
    """Main app entry point."""
    initialize_session_state()
    controller = get_controller()

    if controller.session.is_authenticated:
        storage = get_session_storage()
        if st.session_state.cookie_save_pending and storage.is_ready():
            account = controller.session.account
            if storage.save_session({"uid": account.uid, "email": account.email}):
                st.session_state.cookie_save_pending = False
        main_app()
        return

    storage = get_session_storage()
    if not storage.is_ready():
        st.info("Loading...")
        time.sleep(0.5)
        st.rerun()
        return

    if restore_session_from_cookie():
        st.rerun()
        return

    login_page()


if __name__ == "__main__":
    main()

"""
Rule tests for the program validator.

Each class covers one rule pass; the boundaries tested here (0.40/0.65
deload band, MRV tiers, 3rd consecutive high-CNS day, 4th beginner day,
1-day recovery gap) are the documented thresholds.
"""

import copy

import pytest

from lift_check.core.config import (
    ALL_RULES,
    RULE_BEGINNER_OVERTRAINING,
    RULE_CNS_OVERLOAD,
    RULE_DELOAD_REQUIRED,
    RULE_DELOAD_VOLUME_INVALID,
    RULE_INSUFFICIENT_RECOVERY,
    RULE_VOLUME_EXCEEDS_MRV,
    RuleThresholds,
)
from lift_check.core.models import (
    DayOfWeek,
    Exercise,
    ExerciseCategory,
    ExperienceLevel,
    MuscleGroup,
    ProgramDay,
    ProgramWeek,
    TemplateExercise,
    TrainingProgram,
    WorkoutTemplate,
)
from lift_check.core.validator import (
    ProgramValidator,
    muscle_schedule,
    validate_program,
    weekly_muscle_volume,
)

MON, TUE, WED, THU, FRI, SAT, SUN = list(DayOfWeek)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _exercise(
    name: str = "Cable Fly",
    muscles: tuple[MuscleGroup, ...] = (MuscleGroup.CHEST,),
    compound: bool = False,
    category: ExerciseCategory = ExerciseCategory.STRENGTH,
    secondary: tuple[MuscleGroup, ...] = (),
) -> Exercise:
    return Exercise(
        name=name,
        category=category,
        primary_muscles=list(muscles),
        secondary_muscles=list(secondary),
        is_compound=compound,
    )


def _squat() -> Exercise:
    """High-CNS compound: quads + glutes."""
    return _exercise("Barbell Back Squat", (MuscleGroup.QUADS, MuscleGroup.GLUTES), compound=True)


def _curl() -> Exercise:
    """Low-CNS isolation: biceps."""
    return _exercise("Barbell Curl", (MuscleGroup.BICEPS,))


def _template(*entries: tuple[Exercise | None, int], name: str = "Session") -> WorkoutTemplate:
    return WorkoutTemplate(
        name=name,
        exercises=[TemplateExercise(exercise=ex, set_count=sets) for ex, sets in entries],
    )


def _week(
    number: int = 1,
    training: dict[DayOfWeek, WorkoutTemplate | None] | None = None,
    deload: bool = False,
    multiplier: float | None = None,
    fill_rest: bool = True,
) -> ProgramWeek:
    """Week with the given training days; remaining weekdays become rest days."""
    training = training or {}
    days = [ProgramDay(day_of_week=d, template=t) for d, t in training.items()]
    if fill_rest:
        days += [ProgramDay(day_of_week=d, rest_day=True) for d in DayOfWeek if d not in training]
    if multiplier is None:
        multiplier = 0.5 if deload else 1.0
    return ProgramWeek(week_number=number, days=days, deload_week=deload, volume_multiplier=multiplier)


def _program(weeks: list[ProgramWeek], duration: int | None = None) -> TrainingProgram:
    return TrainingProgram(
        name="Test Program",
        duration_weeks=len(weeks) if duration is None else duration,
        weeks=weeks,
    )


def _simple_weeks(count: int, deload_at: int | None = None, multiplier: float = 0.5) -> list[ProgramWeek]:
    """Mon/Wed/Fri chest isolation work, 3 sets per session."""
    sessions = {MON: _template((_exercise(), 3)), WED: _template((_exercise(), 3)), FRI: _template((_exercise(), 3))}
    return [
        _week(n, sessions, deload=(n == deload_at), multiplier=multiplier if n == deload_at else 1.0)
        for n in range(1, count + 1)
    ]


validator = ProgramValidator()


# ---------------------------------------------------------------------------
# Deload requirement
# ---------------------------------------------------------------------------


class TestDeloadRequirement:
    @pytest.mark.parametrize("weeks", [1, 2, 3])
    def test_short_program_needs_no_deload(self, weeks):
        """Programs under 4 weeks never get DeloadRequired."""
        result = validator.validate(_program(_simple_weeks(weeks)), ExperienceLevel.INTERMEDIATE)
        assert RULE_DELOAD_REQUIRED not in result.rules()

    @pytest.mark.parametrize("weeks", [4, 5, 12])
    def test_long_program_without_deload_fails(self, weeks):
        result = validator.validate(_program(_simple_weeks(weeks)), ExperienceLevel.INTERMEDIATE)
        violations = result.by_rule(RULE_DELOAD_REQUIRED)
        assert len(violations) == 1
        assert f"{weeks} weeks" in violations[0].message

    def test_long_program_with_deload_is_valid(self):
        program = _program(_simple_weeks(5, deload_at=4))
        result = validator.validate(program, ExperienceLevel.INTERMEDIATE)
        assert result.is_valid

    def test_zero_weeks_present_still_requires_deload(self):
        """Declared duration drives the check, not the weeks supplied."""
        result = validator.validate(_program([], duration=6), ExperienceLevel.INTERMEDIATE)
        assert result.rules() == [RULE_DELOAD_REQUIRED]

    @pytest.mark.parametrize("multiplier", [0.40, 0.50, 0.65])
    def test_deload_multiplier_inside_band_passes(self, multiplier):
        program = _program(_simple_weeks(4, deload_at=4, multiplier=multiplier))
        result = validator.validate(program, ExperienceLevel.INTERMEDIATE)
        assert RULE_DELOAD_VOLUME_INVALID not in result.rules()

    @pytest.mark.parametrize("multiplier", [0.39, 0.66, 0.0, 1.0])
    def test_deload_multiplier_outside_band_fails(self, multiplier):
        program = _program(_simple_weeks(4, deload_at=4, multiplier=multiplier))
        violations = validator.validate(program, ExperienceLevel.INTERMEDIATE).by_rule(
            RULE_DELOAD_VOLUME_INVALID
        )
        assert len(violations) == 1
        assert "Week 4" in violations[0].message
        assert f"{multiplier:.0%}" in violations[0].message

    def test_multiplier_checked_on_short_programs_too(self):
        program = _program(_simple_weeks(2, deload_at=2, multiplier=0.9))
        assert validator.validate(program, None).rules() == [RULE_DELOAD_VOLUME_INVALID]

    def test_every_bad_deload_week_reported(self):
        weeks = [
            _week(1, deload=True, multiplier=0.2),
            _week(2),
            _week(3, deload=True, multiplier=0.8),
            _week(4),
        ]
        result = validator.validate(_program(weeks), ExperienceLevel.INTERMEDIATE)
        messages = [v.message for v in result.by_rule(RULE_DELOAD_VOLUME_INVALID)]
        assert len(messages) == 2
        assert "Week 1" in messages[0] and "20%" in messages[0]
        assert "Week 3" in messages[1] and "80%" in messages[1]
        assert RULE_DELOAD_REQUIRED not in result.rules()


# ---------------------------------------------------------------------------
# Volume limits
# ---------------------------------------------------------------------------


class TestVolumeLimits:
    def _chest_week(self, total_sets: int, deload: bool = False) -> ProgramWeek:
        """Chest isolation spread over Mon/Wed/Fri summing to total_sets."""
        per_day = [total_sets // 3] * 3
        for i in range(total_sets % 3):
            per_day[i] += 1
        sessions = {
            day: _template((_exercise(), sets)) for day, sets in zip((MON, WED, FRI), per_day)
        }
        return _week(1, sessions, deload=deload)

    def test_intermediate_at_mrv_passes(self):
        result = validator.validate(_program([self._chest_week(20)]), ExperienceLevel.INTERMEDIATE)
        assert result.is_valid

    def test_intermediate_above_mrv_fails(self):
        result = validator.validate(_program([self._chest_week(21)]), ExperienceLevel.INTERMEDIATE)
        assert result.rules() == [RULE_VOLUME_EXCEEDS_MRV]
        message = result.violations[0].message
        assert "Week 1" in message
        assert "Chest" in message
        assert "21 sets" in message
        assert "MRV of 20" in message

    @pytest.mark.parametrize(
        "level, mrv",
        [
            (ExperienceLevel.BEGINNER, 12),
            (ExperienceLevel.NOVICE, 12),
            (ExperienceLevel.INTERMEDIATE, 20),
            (ExperienceLevel.ADVANCED, 25),
            (ExperienceLevel.ELITE, 25),
            ("unknown-tier", 16),
            (None, 16),
        ],
    )
    def test_mrv_table(self, level, mrv):
        at_limit = validator.validate(_program([self._chest_week(mrv)]), level)
        over = validator.validate(_program([self._chest_week(mrv + 1)]), level)
        assert RULE_VOLUME_EXCEEDS_MRV not in at_limit.rules()
        assert over.by_rule(RULE_VOLUME_EXCEEDS_MRV)[0].message.count(f"MRV of {mrv}") == 1

    def test_multi_muscle_exercise_counts_fully_for_each_muscle(self):
        """5 sets x 3 days of a 2-muscle exercise = 15 sets for each muscle."""
        hip_thrust = _exercise("Hip Thrust", (MuscleGroup.GLUTES, MuscleGroup.HAMSTRINGS))
        sessions = {d: _template((hip_thrust, 5)) for d in (MON, WED, FRI)}
        week = _week(1, sessions)

        assert weekly_muscle_volume(week) == {MuscleGroup.GLUTES: 15, MuscleGroup.HAMSTRINGS: 15}

        result = validator.validate(_program([week]), ExperienceLevel.BEGINNER)
        violations = result.by_rule(RULE_VOLUME_EXCEEDS_MRV)
        assert len(violations) == 2
        assert "Glutes has 15 sets" in violations[0].message
        assert "Hamstrings has 15 sets" in violations[1].message

    def test_deload_week_volume_not_checked(self):
        week = self._chest_week(40, deload=True)
        result = validator.validate(_program([week]), ExperienceLevel.BEGINNER)
        assert RULE_VOLUME_EXCEEDS_MRV not in result.rules()

    def test_secondary_muscles_ignored(self):
        bench = _exercise("Bench", (MuscleGroup.CHEST,), secondary=(MuscleGroup.TRICEPS,))
        week = _week(1, {MON: _template((bench, 6)), THU: _template((bench, 6))})
        assert weekly_muscle_volume(week) == {MuscleGroup.CHEST: 12}

    def test_week_without_templates_has_no_volume(self):
        """Training days with no template are tolerated and count nothing."""
        week = _week(1, {MON: None, WED: None, FRI: None})
        assert weekly_muscle_volume(week) == {}
        result = validator.validate(_program([week]), ExperienceLevel.INTERMEDIATE)
        assert result.is_valid

    def test_missing_exercise_is_skipped(self):
        week = _week(1, {MON: _template((None, 30), (_exercise(), 4))})
        assert weekly_muscle_volume(week) == {MuscleGroup.CHEST: 4}

    def test_rest_day_template_ignored(self):
        """A template hanging off a rest day contributes no volume."""
        rest_with_template = ProgramDay(day_of_week=TUE, rest_day=True, template=_template((_exercise(), 30)))
        week = ProgramWeek(week_number=1, days=[rest_with_template])
        assert weekly_muscle_volume(week) == {}

    def test_each_week_totalled_separately(self):
        weeks = [self._chest_week(21), _week(2, {MON: _template((_exercise(), 10))})]
        result = validator.validate(_program(weeks), ExperienceLevel.INTERMEDIATE)
        violations = result.by_rule(RULE_VOLUME_EXCEEDS_MRV)
        assert len(violations) == 1
        assert violations[0].message.startswith("Week 1:")


# ---------------------------------------------------------------------------
# CNS load
# ---------------------------------------------------------------------------


class TestCnsLoad:
    def _heavy(self) -> WorkoutTemplate:
        return _template((_squat(), 2))

    def _light(self) -> WorkoutTemplate:
        return _template((_curl(), 2))

    def test_three_consecutive_high_cns_days_fail(self):
        week = _week(1, {MON: self._heavy(), TUE: self._heavy(), WED: self._heavy()})
        violations = validator.validate(_program([week]), None).by_rule(RULE_CNS_OVERLOAD)
        assert len(violations) == 1
        assert "Week 1" in violations[0].message

    def test_two_consecutive_high_cns_days_pass(self):
        week = _week(1, {MON: self._heavy(), TUE: self._heavy(), THU: self._heavy()})
        assert RULE_CNS_OVERLOAD not in validator.validate(_program([week]), None).rules()

    def test_rest_day_resets_streak(self):
        """high, rest, high, high: longest streak is 2."""
        week = _week(1, {MON: self._heavy(), WED: self._heavy(), THU: self._heavy()})
        assert RULE_CNS_OVERLOAD not in validator.validate(_program([week]), None).rules()

    def test_day_without_template_resets_streak(self):
        week = _week(1, {MON: self._heavy(), TUE: None, WED: self._heavy(), THU: self._heavy()})
        assert RULE_CNS_OVERLOAD not in validator.validate(_program([week]), None).rules()

    def test_low_cns_day_resets_streak(self):
        week = _week(1, {MON: self._heavy(), TUE: self._light(), WED: self._heavy(), THU: self._heavy()})
        assert RULE_CNS_OVERLOAD not in validator.validate(_program([week]), None).rules()

    def test_long_streak_reports_every_day_past_the_limit(self):
        """A 5-day streak emits on days 3, 4 and 5."""
        week = _week(1, {d: self._heavy() for d in (MON, TUE, WED, THU, FRI)})
        assert len(validator.validate(_program([week]), None).by_rule(RULE_CNS_OVERLOAD)) == 3

    def test_days_scanned_in_weekday_order(self):
        """Insertion order Wed, Mon, Tue must still be read as Mon-Tue-Wed."""
        week = ProgramWeek(
            week_number=1,
            days=[
                ProgramDay(day_of_week=WED, template=self._heavy()),
                ProgramDay(day_of_week=MON, template=self._heavy()),
                ProgramDay(day_of_week=TUE, template=self._heavy()),
            ],
        )
        assert len(validator.validate(_program([week]), None).by_rule(RULE_CNS_OVERLOAD)) == 1

    def test_missing_weekdays_do_not_break_streak(self):
        """Only listed days are scanned; absent weekdays are not implicit rest days."""
        week = _week(1, {MON: self._heavy(), WED: self._heavy(), FRI: self._heavy()}, fill_rest=False)
        assert len(validator.validate(_program([week]), None).by_rule(RULE_CNS_OVERLOAD)) == 1

    def test_any_high_cns_exercise_marks_the_day(self):
        mixed = _template((_curl(), 3), (_squat(), 1))
        week = _week(1, {MON: mixed, TUE: mixed, WED: mixed})
        assert RULE_CNS_OVERLOAD in validator.validate(_program([week]), None).rules()

    def test_power_compound_is_high_cns(self):
        clean = _exercise("Power Clean", (MuscleGroup.FULL_BODY,), compound=True, category=ExerciseCategory.POWER)
        week = _week(1, {d: _template((clean, 1)) for d in (SAT, SUN, FRI)})
        assert RULE_CNS_OVERLOAD in validator.validate(_program([week]), None).rules()

    def test_non_compound_strength_is_not_high_cns(self):
        fly = _exercise()
        week = _week(1, {d: _template((fly, 1)) for d in (MON, TUE, WED, THU)})
        assert RULE_CNS_OVERLOAD not in validator.validate(_program([week]), None).rules()

    def test_streak_does_not_carry_across_weeks(self):
        weeks = [
            _week(1, {SAT: self._heavy(), SUN: self._heavy()}),
            _week(2, {MON: self._heavy()}),
        ]
        assert RULE_CNS_OVERLOAD not in validator.validate(_program(weeks), None).rules()

    def test_deload_weeks_are_checked(self):
        week = _week(1, {MON: self._heavy(), TUE: self._heavy(), WED: self._heavy()}, deload=True)
        assert RULE_CNS_OVERLOAD in validator.validate(_program([week]), None).rules()


# ---------------------------------------------------------------------------
# Beginner constraints
# ---------------------------------------------------------------------------


class TestBeginnerConstraints:
    def _days(self, n: int) -> dict[DayOfWeek, WorkoutTemplate | None]:
        return {d: None for d in list(DayOfWeek)[:n]}

    def test_three_days_pass(self):
        result = validator.validate(_program([_week(1, self._days(3))]), ExperienceLevel.BEGINNER)
        assert RULE_BEGINNER_OVERTRAINING not in result.rules()

    def test_four_days_fail(self):
        result = validator.validate(_program([_week(1, self._days(4))]), ExperienceLevel.BEGINNER)
        violations = result.by_rule(RULE_BEGINNER_OVERTRAINING)
        assert len(violations) == 1
        assert "Week 1" in violations[0].message
        assert "found 4" in violations[0].message

    def test_level_string_is_case_insensitive(self):
        result = validator.validate(_program([_week(1, self._days(5))]), "Beginner")
        assert RULE_BEGINNER_OVERTRAINING in result.rules()

    @pytest.mark.parametrize(
        "level",
        [ExperienceLevel.NOVICE, ExperienceLevel.INTERMEDIATE, ExperienceLevel.ELITE, None, "expert"],
    )
    def test_other_levels_exempt(self, level):
        result = validator.validate(_program([_week(1, self._days(6))]), level)
        assert RULE_BEGINNER_OVERTRAINING not in result.rules()

    def test_deload_week_exempt(self):
        week = _week(1, self._days(5), deload=True)
        result = validator.validate(_program([week]), ExperienceLevel.BEGINNER)
        assert RULE_BEGINNER_OVERTRAINING not in result.rules()

    def test_training_days_count_without_templates(self):
        assert _week(1, self._days(4)).training_day_count() == 4


# ---------------------------------------------------------------------------
# Recovery windows
# ---------------------------------------------------------------------------


class TestRecoveryWindows:
    def test_back_to_back_days_fail(self):
        week = _week(1, {MON: _template((_curl(), 3)), TUE: _template((_curl(), 3))})
        violations = validator.validate(_program([week]), None).by_rule(RULE_INSUFFICIENT_RECOVERY)
        assert len(violations) == 1
        message = violations[0].message
        assert "Week 1" in message
        assert "Biceps" in message
        assert "(Monday and Tuesday)" in message

    def test_one_rest_day_between_passes(self):
        week = _week(1, {MON: _template((_curl(), 3)), WED: _template((_curl(), 3))})
        assert RULE_INSUFFICIENT_RECOVERY not in validator.validate(_program([week]), None).rules()

    def test_same_day_twice_not_flagged(self):
        week = _week(1, {MON: _template((_curl(), 3), (_curl(), 3))})
        assert muscle_schedule(week) == {MuscleGroup.BICEPS: [MON]}
        assert RULE_INSUFFICIENT_RECOVERY not in validator.validate(_program([week]), None).rules()

    def test_same_day_twice_then_next_day_flagged_once(self):
        week = _week(1, {MON: _template((_curl(), 3), (_curl(), 3)), TUE: _template((_curl(), 3))})
        violations = validator.validate(_program([week]), None).by_rule(RULE_INSUFFICIENT_RECOVERY)
        assert len(violations) == 1

    def test_single_session_has_nothing_to_compare(self):
        week = _week(1, {FRI: _template((_curl(), 3))})
        assert validator.validate(_program([week]), None).is_valid

    def test_week_does_not_wrap_sunday_to_monday(self):
        week = _week(1, {MON: _template((_curl(), 3)), SUN: _template((_curl(), 3))})
        assert RULE_INSUFFICIENT_RECOVERY not in validator.validate(_program([week]), None).rules()

    def test_insertion_order_irrelevant(self):
        week = ProgramWeek(
            week_number=1,
            days=[
                ProgramDay(day_of_week=FRI, template=_template((_curl(), 3))),
                ProgramDay(day_of_week=THU, template=_template((_curl(), 3))),
            ],
        )
        violations = validator.validate(_program([week]), None).by_rule(RULE_INSUFFICIENT_RECOVERY)
        assert "(Thursday and Friday)" in violations[0].message

    def test_each_muscle_of_exercise_checked(self):
        week = _week(1, {MON: _template((_squat(), 2)), TUE: _template((_squat(), 2))})
        messages = [v.message for v in validator.validate(_program([week]), None).by_rule(RULE_INSUFFICIENT_RECOVERY)]
        assert len(messages) == 2
        assert any("Quads" in m for m in messages)
        assert any("Glutes" in m for m in messages)

    def test_deload_weeks_are_checked(self):
        week = _week(1, {MON: _template((_curl(), 1)), TUE: _template((_curl(), 1))}, deload=True)
        assert RULE_INSUFFICIENT_RECOVERY in validator.validate(_program([week]), None).rules()

    def test_rest_day_with_template_ignored(self):
        week = ProgramWeek(
            week_number=1,
            days=[
                ProgramDay(day_of_week=MON, template=_template((_curl(), 3))),
                ProgramDay(day_of_week=TUE, rest_day=True, template=_template((_curl(), 3))),
            ],
        )
        assert RULE_INSUFFICIENT_RECOVERY not in validator.validate(_program([week]), None).rules()


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


class TestProgramValidator:
    def test_end_to_end_only_deload_missing(self):
        """5 weeks, no deload, intermediate, one muscle at 15 sets over 3 days."""
        result = validator.validate(_program(_simple_weeks(5)), ExperienceLevel.INTERMEDIATE)
        assert not result.is_valid
        assert result.rules() == [RULE_DELOAD_REQUIRED]
        assert "5 weeks" in result.violations[0].message

    def test_rules_emitted_in_fixed_order(self):
        heavy = _template((_squat(), 5))
        weeks = [
            _week(1, {d: heavy for d in (MON, TUE, WED, THU)}),
            _week(2, deload=True, multiplier=0.9),
        ]
        result = validator.validate(_program(weeks, duration=5), ExperienceLevel.BEGINNER)

        first_seen = list(dict.fromkeys(result.rules()))
        assert first_seen == [
            RULE_DELOAD_VOLUME_INVALID,
            RULE_VOLUME_EXCEEDS_MRV,
            RULE_CNS_OVERLOAD,
            RULE_BEGINNER_OVERTRAINING,
            RULE_INSUFFICIENT_RECOVERY,
        ]
        assert set(first_seen) <= set(ALL_RULES)

    def test_deterministic(self):
        heavy = _template((_squat(), 5))
        program = _program([_week(1, {d: heavy for d in (MON, TUE, WED, THU)})], duration=6)
        first = validator.validate(program, ExperienceLevel.BEGINNER)
        second = validator.validate(program, ExperienceLevel.BEGINNER)
        assert first.violations == second.violations

    def test_does_not_modify_program(self):
        program = _program(_simple_weeks(5))
        before = copy.deepcopy(program)
        validator.validate(program, ExperienceLevel.BEGINNER)
        assert program == before

    def test_fresh_result_per_call(self):
        program = _program(_simple_weeks(5))
        first = validator.validate(program, ExperienceLevel.INTERMEDIATE)
        validator.validate(program, ExperienceLevel.INTERMEDIATE)
        assert len(first.violations) == 1

    def test_none_program_rejected(self):
        with pytest.raises(ValueError):
            validator.validate(None, ExperienceLevel.INTERMEDIATE)

    def test_empty_program_is_valid(self):
        assert validator.validate(_program([], duration=1), ExperienceLevel.BEGINNER).is_valid

    def test_custom_thresholds(self):
        strict = RuleThresholds(cns_max_consecutive_days=1, min_recovery_days=3)
        week = _week(1, {MON: _template((_squat(), 1)), TUE: _template((_squat(), 1))})
        result = validate_program(_program([week]), None, thresholds=strict)
        assert len(result.by_rule(RULE_CNS_OVERLOAD)) == 1

        spaced = _week(1, {MON: _template((_curl(), 1)), WED: _template((_curl(), 1))})
        result = validate_program(_program([spaced]), None, thresholds=strict)
        assert "72-hour" in result.by_rule(RULE_INSUFFICIENT_RECOVERY)[0].message

    def test_deload_rules_agree_with_model_helpers(self):
        """Overridden deload thresholds drive both the rule and the model helpers."""
        lenient = RuleThresholds(deload_required_min_weeks=6, deload_multiplier_max=0.75)
        weeks = _simple_weeks(5, deload_at=5, multiplier=0.7)
        program = _program(weeks[:4], duration=5)

        assert program.has_required_deload_week(lenient)
        assert validate_program(program, ExperienceLevel.INTERMEDIATE, thresholds=lenient).is_valid

        deloaded = _program(weeks)
        assert weeks[4].is_volume_multiplier_valid(lenient)
        assert validate_program(deloaded, ExperienceLevel.INTERMEDIATE, thresholds=lenient).is_valid
        assert validate_program(deloaded, ExperienceLevel.INTERMEDIATE).rules() == [RULE_DELOAD_VOLUME_INVALID]

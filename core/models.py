from django.core.validators import MinValueValidator
from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone

from core.academic.grade_calculator import Category, CategoryWeights


class Course(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class ClassGroup(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="class_groups")
    instructor = models.ForeignKey(User, on_delete=models.PROTECT, related_name="taught_classes")
    name = models.CharField(max_length=255)
    school_year = models.CharField(max_length=32, blank=True, default="")
    # Required, no column default: gradebook.create_class_group supplies the standard split.
    weight_projects = models.FloatField(validators=[MinValueValidator(0)])
    weight_quiz = models.FloatField(validators=[MinValueValidator(0)])
    weight_participation = models.FloatField(validators=[MinValueValidator(0)])
    weight_real_world = models.FloatField(validators=[MinValueValidator(0)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def get_category_weights(self) -> CategoryWeights:
        return CategoryWeights(
            projects=self.weight_projects,
            quiz=self.weight_quiz,
            participation=self.weight_participation,
            real_world=self.weight_real_world,
        )

    def __str__(self):
        return f"{self.course.name} - {self.name}"


class Enrollment(models.Model):
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="enrollments")
    class_group = models.ForeignKey(ClassGroup, on_delete=models.CASCADE, related_name="enrollments")
    enrolled_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["student", "class_group"], name="uniq_enrollment_student_class"),
        ]

    def __str__(self):
        return f"{self.student.username} @ {self.class_group.name}"


class Quiz(models.Model):
    class_group = models.ForeignKey(ClassGroup, on_delete=models.CASCADE, related_name="quizzes")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    # List of question definitions: {id, type, text, options, correct_answer, points}
    questions = models.JSONField(default=list, blank=True)
    time_limit_minutes = models.PositiveIntegerField(null=True, blank=True)
    attempts_allowed = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title


class Grade(models.Model):
    CATEGORY_CHOICES = [(c.value, c.value) for c in Category]

    enrollment = models.ForeignKey(Enrollment, on_delete=models.CASCADE, related_name="grades")
    category = models.CharField(max_length=32, choices=CATEGORY_CHOICES)
    earned_points = models.FloatField()
    possible_points = models.FloatField()
    quiz = models.ForeignKey(Quiz, on_delete=models.SET_NULL, null=True, blank=True, related_name="grades")
    recorded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-recorded_at"]
        indexes = [
            models.Index(fields=["enrollment", "category"]),
        ]

    def __str__(self):
        return f"{self.enrollment} {self.category} {self.earned_points}/{self.possible_points}"


class QuizAttempt(models.Model):
    enrollment = models.ForeignKey(Enrollment, on_delete=models.CASCADE, related_name="quiz_attempts")
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="attempts")
    attempt_number = models.PositiveIntegerField()
    started_at = models.DateTimeField(default=timezone.now)
    submitted_at = models.DateTimeField(null=True, blank=True)
    answers = models.JSONField(default=dict, blank=True)
    earned_points = models.FloatField(null=True, blank=True)
    possible_points = models.FloatField(default=0.0)
    score = models.FloatField(null=True, blank=True)

    class Meta:
        ordering = ["-attempt_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["enrollment", "quiz", "attempt_number"],
                name="uniq_attempt_number_per_enrollment_quiz",
            ),
        ]

    def __str__(self):
        state = "submitted" if self.submitted_at else "started"
        return f"{self.enrollment} quiz={self.quiz_id} #{self.attempt_number} [{state}]"


class BudgetEntry(models.Model):
    enrollment = models.ForeignKey(Enrollment, on_delete=models.CASCADE, related_name="budget_entries")
    monthly_income = models.FloatField()
    needs = models.FloatField()
    wants = models.FloatField()
    savings = models.FloatField()
    scenario_name = models.CharField(max_length=255, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    is_hypothetical = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.enrollment} budget income={self.monthly_income}"


class WealthSnapshot(models.Model):
    enrollment = models.ForeignKey(Enrollment, on_delete=models.CASCADE, related_name="wealth_snapshots")
    record_date = models.DateField()
    assets = models.JSONField(default=dict, blank=True)
    liabilities = models.JSONField(default=dict, blank=True)
    total_assets = models.FloatField(default=0.0)
    total_liabilities = models.FloatField(default=0.0)
    net_worth = models.FloatField(default=0.0)
    notes = models.TextField(blank=True, default="")
    is_hypothetical = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["record_date", "id"]
        indexes = [
            models.Index(fields=["enrollment", "record_date"]),
        ]

    def __str__(self):
        return f"{self.enrollment} {self.record_date} net={self.net_worth:.2f}"

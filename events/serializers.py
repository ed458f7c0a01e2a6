import json

from rest_framework import serializers

from core.uploads import storage_url
from .clock import event_start
from .models import Event, Attendee, Feedback, validate_hhmm


# -----------------------------------------
# CHALLENGE QUESTION
# -----------------------------------------
class AttendanceQuestionField(serializers.Field):
    """
    Accepts the challenge either as an object or as a JSON string (multipart
    forms send it that way):

        {"question": "2+2?", "options": ["3", "4"], "correct_answer": "4"}

    `correctAnswer` is accepted as an alias of `correct_answer`.
    """
    default_error_messages = {
        "invalid": "Invalid format for attendance question data.",
        "answer_required": "A correct answer is required when a question is set.",
    }

    def to_internal_value(self, data):
        if data in (None, ""):
            return {"question": "", "options": [], "correct_answer": ""}

        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError:
                self.fail("invalid")

        if not isinstance(data, dict):
            self.fail("invalid")

        options = data.get("options") or []
        if not isinstance(options, list):
            self.fail("invalid")

        question = str(data.get("question") or "").strip()
        answer = data.get("correct_answer", data.get("correctAnswer")) or ""
        answer = str(answer).strip()
        if question and not answer:
            self.fail("answer_required")

        return {
            "question": question,
            "options": [str(option).strip() for option in options if str(option).strip()],
            "correct_answer": answer,
        }

    def to_representation(self, value):
        return value


# -----------------------------------------
# EVENT SERIALIZER
# -----------------------------------------
class EventSerializer(serializers.ModelSerializer):
    created_by_name = serializers.CharField(source="created_by.display_name", read_only=True)

    time = serializers.CharField(
        max_length=5, required=False, allow_blank=True, validators=[validate_hhmm]
    )
    registration_fee = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )
    attendance_question = AttendanceQuestionField(write_only=True, required=False)

    challenge = serializers.SerializerMethodField()
    starts_at = serializers.SerializerMethodField()
    poster_image = serializers.SerializerMethodField()
    has_certificate_template = serializers.SerializerMethodField()
    attendees_count = serializers.SerializerMethodField()
    is_registered = serializers.SerializerMethodField()
    qr_code_id = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "description",
            "event_type",
            "date",
            "time",
            "starts_at",
            "venue",
            "event_mode",
            "meeting_link",
            "status",
            "registration_limit",
            "registration_fee",
            "attendance_question",
            "challenge",
            "poster_url",
            "poster_image",
            "has_certificate_template",
            "qr_code_id",
            "created_by",
            "created_by_name",
            "attendees_count",
            "is_registered",
            "created_at",
        ]
        read_only_fields = [
            "id",
            "status",
            "poster_url",
            "created_by",
            "created_at",
        ]

    def _viewer_manages(self, obj):
        request = self.context.get("request")
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        return user.is_admin or obj.created_by_id == user.id

    def get_challenge(self, obj):
        if not obj.has_attendance_question:
            return None
        data = {
            "question": obj.attendance_question,
            "options": obj.attendance_options,
        }
        # The answer is only for the club that set it (and admins)
        if self._viewer_manages(obj):
            data["correct_answer"] = obj.attendance_answer
        return data

    def get_starts_at(self, obj):
        try:
            return event_start(obj).isoformat()
        except ValueError:
            # rows written before the HH:MM validator existed
            return None

    def get_poster_image(self, obj):
        return storage_url(obj.poster_url, self.context.get("request"))

    def get_has_certificate_template(self, obj) -> bool:
        return bool(obj.certificate_template_url)

    def get_attendees_count(self, obj) -> int:
        # Use annotated value if available (from optimized query), else fallback
        if hasattr(obj, "_annotated_attendees_count"):
            return obj._annotated_attendees_count or 0
        return obj.attendees.count()

    def get_is_registered(self, obj):
        request = self.context.get("request")
        if request and request.user.is_authenticated:
            return obj.attendees.filter(user=request.user).exists()
        return False

    def get_qr_code_id(self, obj):
        return obj.qr_code_id if self._viewer_manages(obj) else None

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title cannot be empty.")
        return value

    def validate(self, attrs):
        mode = attrs.get("event_mode", getattr(self.instance, "event_mode", Event.MODE_OFFLINE))
        if mode == Event.MODE_ONLINE:
            link = attrs.get("meeting_link", getattr(self.instance, "meeting_link", ""))
            if not link:
                raise serializers.ValidationError(
                    {"meeting_link": ["A meeting link is required for online events."]}
                )
        else:
            # Only online events keep a meeting link
            attrs["meeting_link"] = ""
        return attrs

    def _apply_question(self, validated_data):
        question = validated_data.pop("attendance_question", None)
        if question is not None:
            validated_data["attendance_question"] = question["question"]
            validated_data["attendance_options"] = question["options"]
            validated_data["attendance_answer"] = question["correct_answer"]
        return validated_data

    def create(self, validated_data):
        return super().create(self._apply_question(validated_data))


class CheckInEventSerializer(serializers.ModelSerializer):
    """What the public check-in page may see. Never the answer."""
    question = serializers.CharField(source="attendance_question", read_only=True)
    options = serializers.JSONField(source="attendance_options", read_only=True)

    class Meta:
        model = Event
        fields = ["title", "date", "time", "venue", "question", "options"]


# -----------------------------------------
# ROSTER
# -----------------------------------------
class AttendeeSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(source="user.id", read_only=True)
    name = serializers.CharField(source="user.display_name", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Attendee
        fields = [
            "id",
            "user_id",
            "name",
            "email",
            "registered_college",
            "is_attended",
            "payment_id",
            "registered_at",
            "attended_at",
        ]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    college_name = serializers.CharField(allow_blank=True, max_length=255, default="")


class SelfCheckInSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(required=False, allow_blank=True)
    answer = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ManualAttendanceSerializer(serializers.Serializer):
    student_id = serializers.IntegerField()


# -----------------------------------------
# FEEDBACK
# -----------------------------------------
class FeedbackSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(source="user.display_name", read_only=True)

    class Meta:
        model = Feedback
        fields = ["id", "event", "user", "user_name", "rating", "comment", "created_at"]
        read_only_fields = ["id", "event", "user", "user_name", "created_at"]

    def validate_rating(self, value):
        if value < 1 or value > 5:
            raise serializers.ValidationError("Rating must be between 1 and 5.")
        return value

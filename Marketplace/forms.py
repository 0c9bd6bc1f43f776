from django import forms
from django.core.exceptions import ValidationError

RATING_CHOICES = [
    (1, '★'),
    (2, '★★'),
    (3, '★★★'),
    (4, '★★★★'),
    (5, '★★★★★'),
]


class ReviewForm(forms.Form):
    rating = forms.TypedChoiceField(choices=RATING_CHOICES, coerce=int, error_messages={
        'required': "Rating must be between 1 and 5",
        'invalid_choice': "Rating must be between 1 and 5",
    })
    comment = forms.CharField(max_length=2000, error_messages={
        'required': "Comment must be at least 10 characters long",
    })

    def clean_comment(self):
        comment = self.cleaned_data.get('comment', '').strip()
        if len(comment) < 10:
            raise ValidationError("Comment must be at least 10 characters long")
        return comment

    def first_error(self):
        for field_errors in self.errors.values():
            return field_errors[0]
        return None

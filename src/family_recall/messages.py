"""Fixed Hebrew message set shown to the user."""

NO_SIBLINGS = "אין אחים"
NO_SIBLINGS_SHORT = "אין"
PLACEHOLDER_OPTION = "—"

TRUE_LABEL = "נכון"
FALSE_LABEL = "לא נכון"
TIME_UP = "נגמר הזמן"

EMPTY_INPUT = "הטקסט ריק. יש להזין לפחות אדם אחד."
ONE_INCOMPLETE_LINE = (
    "שגיאה בפורמט: נותרה שורה אחת לא שלמה (חסרות שורות הורים ואחים). "
    "סך הכל {count} שורות שאינן ריקות - לא מתחלק ב-3."
)
SOME_INCOMPLETE_LINES = (
    "שגיאה בפורמט: נותרו {remainder} שורות לא שלמות (חסרה שורת אחים). "
    "סך הכל {count} שורות שאינן ריקות - לא מתחלק ב-3."
)

PARENT_STATEMENT = "{value} הוא/היא הורה של {name}"
SIBLING_STATEMENT = "{value} הוא/היא אח/ות של {name}"
NO_SIBLINGS_STATEMENT = "ל{name} אין אחים"

WHO_ARE_PARENTS = "מי ההורים של {name}?"
WHO_ARE_SIBLINGS = "מי האחים של {name}?"
WHO_IS_THIS = "מי זה? הורים: {parents} | אחים: {siblings}"

PARENTS_BLANK = "הורים של {name}: {visible} ו___"
SIBLINGS_BLANK = "אחים של {name}: {visible} ו___"
WHO_IS_PARENT = "מי ההורה של {name}?"
WHO_IS_CHILD = "ההורים הם {parents}. מי הילד/ה?"

FREE_RECALL_ANSWER = "הורים: {parents}, אחים: {siblings}"

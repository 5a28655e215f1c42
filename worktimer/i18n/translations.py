# -*- coding: utf-8 -*-
"""
Translation dictionaries for English and Arabic.

This module contains all translatable strings for the Work Timer application.
"""

TRANSLATIONS = {
    "en": {
        # Application
        "app.name": "Work Timer",
        "app.ready": "Work Timer Ready",

        # Tray menu
        "tray.refresh": "Refresh",
        "tray.quit": "Quit",
        "tray.recent": "Recent tasks",
        "tray.floating": "Show floating timer",

        # Timer controls
        "timer.start": "Start",
        "timer.stop": "Stop",
        "timer.start_tooltip": "Start tracking time",
        "timer.stop_tooltip": "Stop the timer",
        "timer.loading": "Please wait...",
        "timer.busy_other": "A timer is already running on: {title}",
        "timer.running_on": "Timer running on: {title}",
        "timer.unknown_task": "Unknown task",
        "timer.total": "Total: {time}",

        # Floating widget
        "floating.open_task": "Open task",
        "floating.expand": "Show details",
        "floating.collapse": "Hide details",

        # Recent tasks
        "recent.title": "Recent tasks",
        "recent.empty": "No tasks opened yet",

        # Stop dialog
        "stop_dialog.title": "Stop Timer",
        "stop_dialog.prompt": "What did you work on? (optional)",
        "stop_dialog.placeholder": "Short description...",
        "stop_dialog.confirm": "Stop Timer",
        "stop_dialog.cancel": "Cancel",

        # History
        "history.title": "Time Log",
        "history.empty": "No time recorded yet",
        "history.in_progress": "In progress",
        "history.more": "+{count} more entries",
        "history.load_failed": "Could not load time entries: {error}",

        # Errors
        "error": "Error",
        "error.start_failed": "Could not start the timer: {error}",
        "error.stop_failed": "Could not stop the timer: {error}",
        "error.network": "Could not reach the server. Check your connection and try again.",
        "error.conflict": "Another timer is already running. Stop it first.",

        # Durations
        "duration.hours_minutes": "{hours} h {minutes} min",
        "duration.hours": "{hours} h",
        "duration.minutes": "{minutes} min",
        "duration.less_than_minute": "less than a minute",
    },
    "ar": {
        # Application
        "app.name": "مؤقت العمل",
        "app.ready": "مؤقت العمل جاهز",

        # Tray menu
        "tray.refresh": "تحديث",
        "tray.quit": "خروج",
        "tray.recent": "المهام الأخيرة",
        "tray.floating": "إظهار المؤقت العائم",

        # Timer controls
        "timer.start": "بدء",
        "timer.stop": "إيقاف",
        "timer.start_tooltip": "بدء تتبع الوقت",
        "timer.stop_tooltip": "إيقاف التايمر",
        "timer.loading": "يرجى الانتظار...",
        "timer.busy_other": "يوجد تايمر نشط في مهمة أخرى: {title}",
        "timer.running_on": "التايمر يعمل على: {title}",
        "timer.unknown_task": "مهمة غير معروفة",
        "timer.total": "الإجمالي: {time}",

        # Floating widget
        "floating.open_task": "فتح المهمة",
        "floating.expand": "عرض التفاصيل",
        "floating.collapse": "إخفاء التفاصيل",

        # Recent tasks
        "recent.title": "المهام الأخيرة",
        "recent.empty": "لم يتم فتح أي مهمة بعد",

        # Stop dialog
        "stop_dialog.title": "إيقاف التايمر",
        "stop_dialog.prompt": "ماذا أنجزت؟ (اختياري)",
        "stop_dialog.placeholder": "وصف مختصر...",
        "stop_dialog.confirm": "إيقاف التايمر",
        "stop_dialog.cancel": "إلغاء",

        # History
        "history.title": "سجل الوقت",
        "history.empty": "لا يوجد وقت مسجل بعد",
        "history.in_progress": "قيد التشغيل",
        "history.more": "+{count} سجلات أخرى",
        "history.load_failed": "فشل في جلب سجلات الوقت: {error}",

        # Errors
        "error": "خطأ",
        "error.start_failed": "فشل في بدء التايمر: {error}",
        "error.stop_failed": "فشل في إيقاف التايمر: {error}",
        "error.network": "تعذر الاتصال بالخادم. تحقق من الاتصال وحاول مرة أخرى.",
        "error.conflict": "يوجد تايمر نشط بالفعل. أوقفه أولاً.",

        # Durations
        "duration.hours_minutes": "{hours} ساعة و {minutes} دقيقة",
        "duration.hours": "{hours} ساعة",
        "duration.minutes": "{minutes} دقيقة",
        "duration.less_than_minute": "أقل من دقيقة",
    },
}

"""
User-facing message templates, keyed by interface language.
"""

TRANSLATIONS = {
    "en": {
        "header": "=" * 60,
        "title": "CODE EXAM",
        "ask_name": "Enter your name: ",
        "ask_roll": "Enter your roll number: ",
        "name_error": "Error: Name cannot be empty.",
        "roll_error": "Error: Roll number cannot be empty.",
        "ask_bank_pass": "Enter password or key for bank '{bank}': ",
        "bank_error": "Error: Failed to load the problem bank.\nDetails: {error}",
        "config_error": "Error: {error}",
        "auth_success": "Welcome, {name} ({roll})!",
        "session_resumed": "Resuming your session started at {start}.",
        "session_new": "New session started.",
        "load_error": "Warning: {error}",
        "catalog_empty": "No problems are available right now. Try 'refresh' or restart later.",
        "workdir": "Solution files: {path}",

        "cmd_help": (
            "Commands:\n"
            "  list              - list pending and completed problems\n"
            "  open <id|number>  - open a problem (creates its solution file)\n"
            "  show              - show the current problem statement\n"
            "  lang <language>   - switch language ({languages})\n"
            "  run               - run your code on the sample input\n"
            "  submit            - submit your code against all test cases\n"
            "  solution          - show the model answer (after submitting)\n"
            "  status            - show your progress\n"
            "  refresh           - re-sync completed problems\n"
            "  leaderboard       - show the leaderboard\n"
            "  time              - show remaining time\n"
            "  logout            - end the attempt and clear the saved session\n"
            "  exit              - leave (progress is saved)"
        ),
        "cmd_unknown": "Unknown command: '{command}'. Type 'help' for a list of commands.",
        "cmd_open_usage": "Usage: open <id|number>",
        "cmd_lang_usage": "Usage: lang <language>",
        "cmd_no_problem": "No problem selected. Use 'open <id>' first.",
        "cmd_problem_invalid": "Invalid problem '{ref}'. Use 'list' to see problems.",
        "cmd_list_pending": "Pending:",
        "cmd_list_completed": "Completed ({count}):",
        "cmd_list_none": "  (none)",
        "cmd_list_item": "  {num}. [{id}] {title} - {difficulty}, {marks} marks",
        "cmd_open_done": "Opened {id}: edit {path} then 'run' or 'submit'.",
        "cmd_open_review": "{id} is already completed (review mode).",
        "cmd_show_heading": "{title} [{difficulty}] - {marks} marks",
        "cmd_show_sample_input": "Sample input:",
        "cmd_show_sample_output": "Expected output:",
        "cmd_lang_done": "Language set to {language}. Solution file: {path}",
        "cmd_lang_invalid": "Unsupported language '{language}'. Choose from: {languages}",
        "cmd_run_start": "Running {id} on the sample input...",
        "cmd_submit_start": "Validating {id} against all test cases...",
        "cmd_submit_passed": "Passed! Solution recorded ({marks} marks).",
        "cmd_submit_review": "All test cases passed. This problem was already completed, no marks added.",
        "cmd_submit_failed": "Incorrect solution. Fix your code and submit again.",
        "cmd_submit_unscored": "The execution service failed; this attempt was not scored. Submit again.",
        "cmd_submit_score_error": "Your solution passed but the score was not saved: {error}\nSubmit again to retry; your code is kept.",
        "cmd_busy": "'{action}' is still running for {id}.",
        "cmd_solution_locked": "Submit your solution first to see the model answer.",
        "cmd_solution_none": "No model answer provided.",
        "cmd_solution_heading": "Model answer:",
        "cmd_status_header": "Progress for {name}:",
        "cmd_status_line": "  [{mark}] {id} {title}",
        "cmd_status_total": "Completed {done}/{total} problems, {marks}/{max_marks} marks",
        "cmd_time_heading": "Remaining time: {remaining}",
        "cmd_time_elapsed": "Elapsed: {elapsed} minutes",
        "cmd_time_expired": "Time is up. Submissions are closed.",
        "cmd_refresh_done": "Completed problems: {completed}",
        "cmd_logout_done": "Logged out. Your saved session was cleared.",
        "cmd_exit_message": "Session saved. Run the exam again with the same roll number to resume.",
        "cmd_interrupt": "Use 'exit' to leave (progress is saved).",
        "cmd_error": "An unexpected error occurred: {error}",

        "board_heading": "Leaderboard",
        "board_line": "{rank:>3}. {name:<24} {roll:<12} {marks:>4} marks  {solved} solved",
        "results_heading": "Results ({students} students, average {average}%, top score {top})",
        "results_line": "{rank:>3}. {name:<24} {roll:<12} {marks:>4}/{total:<4} {correct:>3} ok {wrong:>3} wrong  {time}",
        "results_empty": "No results recorded yet.",

        "eval_running_cases": "Running {total} test case(s)...",
        "eval_case_passed": "Test Case {num}: PASSED",
        "eval_case_failed": "Test Case {num}: FAILED",
        "eval_case_execution_error": "Test Case {num}: EXECUTION ERROR",
        "eval_error_label": "    Error: {text}",
        "eval_input_label": "    Input: {text}",
        "eval_actual_output": "    Your output: {output}",
        "eval_expected_output": "    Expected: {output}",
        "eval_result_summary": "Result: {passed}/{total} test case(s) passed",
        "eval_not_scored": "Execution service unavailable: this attempt is not scored.",
        "eval_execution_unavailable": "Execution failed: {error}",
        "eval_no_output": "No output returned.",
    },
    "fr": {
        "header": "=" * 60,
        "title": "EXAMEN DE PROGRAMMATION",
        "ask_name": "Entrez votre nom : ",
        "ask_roll": "Entrez votre numéro d'étudiant : ",
        "name_error": "Erreur : le nom ne peut pas être vide.",
        "roll_error": "Erreur : le numéro d'étudiant ne peut pas être vide.",
        "ask_bank_pass": "Mot de passe ou clé pour la banque '{bank}' : ",
        "bank_error": "Erreur : impossible de charger la banque de problèmes.\nDétails : {error}",
        "config_error": "Erreur : {error}",
        "auth_success": "Bienvenue, {name} ({roll}) !",
        "session_resumed": "Reprise de votre session commencée à {start}.",
        "session_new": "Nouvelle session démarrée.",
        "load_error": "Avertissement : {error}",
        "catalog_empty": "Aucun problème disponible. Essayez 'refresh' ou relancez plus tard.",
        "workdir": "Fichiers de solution : {path}",

        "cmd_help": (
            "Commandes :\n"
            "  list              - problèmes en attente et terminés\n"
            "  open <id|numéro>  - ouvrir un problème (crée son fichier de solution)\n"
            "  show              - afficher l'énoncé du problème courant\n"
            "  lang <langage>    - changer de langage ({languages})\n"
            "  run               - exécuter votre code sur l'exemple\n"
            "  submit            - soumettre votre code sur tous les tests\n"
            "  solution          - afficher la solution modèle (après soumission)\n"
            "  status            - afficher votre progression\n"
            "  refresh           - resynchroniser les problèmes terminés\n"
            "  leaderboard       - afficher le classement\n"
            "  time              - temps restant\n"
            "  logout            - terminer et effacer la session sauvegardée\n"
            "  exit              - quitter (progression sauvegardée)"
        ),
        "cmd_unknown": "Commande inconnue : '{command}'. Tapez 'help' pour la liste des commandes.",
        "cmd_open_usage": "Utilisation : open <id|numéro>",
        "cmd_lang_usage": "Utilisation : lang <langage>",
        "cmd_no_problem": "Aucun problème sélectionné. Utilisez d'abord 'open <id>'.",
        "cmd_problem_invalid": "Problème invalide '{ref}'. Utilisez 'list'.",
        "cmd_list_pending": "En attente :",
        "cmd_list_completed": "Terminés ({count}) :",
        "cmd_list_none": "  (aucun)",
        "cmd_list_item": "  {num}. [{id}] {title} - {difficulty}, {marks} points",
        "cmd_open_done": "{id} ouvert : modifiez {path} puis 'run' ou 'submit'.",
        "cmd_open_review": "{id} est déjà terminé (mode révision).",
        "cmd_show_heading": "{title} [{difficulty}] - {marks} points",
        "cmd_show_sample_input": "Exemple d'entrée :",
        "cmd_show_sample_output": "Sortie attendue :",
        "cmd_lang_done": "Langage : {language}. Fichier de solution : {path}",
        "cmd_lang_invalid": "Langage non pris en charge '{language}'. Choix : {languages}",
        "cmd_run_start": "Exécution de {id} sur l'exemple...",
        "cmd_submit_start": "Validation de {id} sur tous les tests...",
        "cmd_submit_passed": "Réussi ! Solution enregistrée ({marks} points).",
        "cmd_submit_review": "Tous les tests passent. Ce problème était déjà terminé, aucun point ajouté.",
        "cmd_submit_failed": "Solution incorrecte. Corrigez votre code et soumettez à nouveau.",
        "cmd_submit_unscored": "Le service d'exécution a échoué ; cette tentative n'est pas notée. Soumettez à nouveau.",
        "cmd_submit_score_error": "Votre solution est correcte mais le score n'a pas été enregistré : {error}\nSoumettez à nouveau ; votre code est conservé.",
        "cmd_busy": "'{action}' est encore en cours pour {id}.",
        "cmd_solution_locked": "Soumettez d'abord votre solution pour voir la solution modèle.",
        "cmd_solution_none": "Aucune solution modèle fournie.",
        "cmd_solution_heading": "Solution modèle :",
        "cmd_status_header": "Progression de {name} :",
        "cmd_status_line": "  [{mark}] {id} {title}",
        "cmd_status_total": "{done}/{total} problèmes terminés, {marks}/{max_marks} points",
        "cmd_time_heading": "Temps restant : {remaining}",
        "cmd_time_elapsed": "Écoulé : {elapsed} minutes",
        "cmd_time_expired": "Le temps est écoulé. Les soumissions sont fermées.",
        "cmd_refresh_done": "Problèmes terminés : {completed}",
        "cmd_logout_done": "Déconnecté. Votre session sauvegardée a été effacée.",
        "cmd_exit_message": "Session sauvegardée. Relancez l'examen avec le même numéro pour reprendre.",
        "cmd_interrupt": "Utilisez 'exit' pour quitter (progression sauvegardée).",
        "cmd_error": "Une erreur inattendue s'est produite : {error}",

        "board_heading": "Classement",
        "board_line": "{rank:>3}. {name:<24} {roll:<12} {marks:>4} points  {solved} résolus",
        "results_heading": "Résultats ({students} étudiants, moyenne {average}%, meilleur score {top})",
        "results_line": "{rank:>3}. {name:<24} {roll:<12} {marks:>4}/{total:<4} {correct:>3} ok {wrong:>3} faux  {time}",
        "results_empty": "Aucun résultat enregistré.",

        "eval_running_cases": "Exécution de {total} test(s)...",
        "eval_case_passed": "Test {num} : RÉUSSI",
        "eval_case_failed": "Test {num} : ÉCHOUÉ",
        "eval_case_execution_error": "Test {num} : ERREUR D'EXÉCUTION",
        "eval_error_label": "    Erreur : {text}",
        "eval_input_label": "    Entrée : {text}",
        "eval_actual_output": "    Votre sortie : {output}",
        "eval_expected_output": "    Attendu : {output}",
        "eval_result_summary": "Résultat : {passed}/{total} test(s) réussi(s)",
        "eval_not_scored": "Service d'exécution indisponible : cette tentative n'est pas notée.",
        "eval_execution_unavailable": "Échec de l'exécution : {error}",
        "eval_no_output": "Aucune sortie.",
    },
}

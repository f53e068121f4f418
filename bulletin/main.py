# bulletin/main.py
"""Interface console (CLI) de consultation des bulletins de l'académie."""
import logging
import traceback
from typing import List

from . import api_client, config, errors, io_utils, processing
from .models import ScoredAssessment, Student, StudentBulletin

students_data: List[Student] = []
notes_data: List[ScoredAssessment] = []

def print_menu():
    """Affiche le menu principal."""
    print("\n" + "="*34)
    print("      BULLETINS — MENU PRINCIPAL")
    print("="*34)
    print("1. Charger les notes depuis un CSV")
    print("2. Charger les données depuis l'API")
    print("3. Afficher la liste des bulletins")
    print("4. Afficher le bulletin d'un étudiant")
    print("5. Rechercher des étudiants")
    print("6. Statistiques de la promotion")
    print("7. Classement par moyenne")
    print("8. Exporter les bulletins en CSV")
    print("9. Trier et afficher la liste")
    print("0. Quitter")
    print("="*34)

def print_bulletin(bulletin: StudentBulletin, view: str = "all"):
    """Affiche le détail d'un bulletin : notes par semestre puis synthèse."""
    student = bulletin.student
    print(f"\n--- Bulletin de {student.full_name} (matricule : {student.matricule or '—'}) ---")

    semesters = config.SEMESTERS if view == "all" else (int(view),)
    for sem in semesters:
        sem_notes = [n for n in bulletin.assessments if n.semester == sem]
        print(f"\nSemestre {sem}")
        if not sem_notes:
            print("  Aucune note enregistrée pour ce semestre.")
            continue
        for n in sem_notes:
            title = n.module.title if n.module else n.module_id
            ec = f"{n.continuous_assessment:.2f}" if n.continuous_assessment is not None else "-"
            ef = f"{n.final_exam:.2f}" if n.final_exam is not None else "-"
            print(f"  {str(title):<28} | EC: {ec:>5} | EF: {ef:>5} | Moy.: {n.score:>5.2f} | "
                  f"{processing.compute_mention(n.score)}")
        result = bulletin.semesters[sem]
        print(f"  Moyenne Semestre {sem} : {result.avg:.2f} / 20 (poids évalués : {result.total_weight:g})")

    annual = processing.compute_annual_average(bulletin.assessments, "all" if view == "all" else int(view))
    label = "annuelle pondérée" if view == "all" else f"du semestre {view}"
    print(f"\nMoyenne {label} : {annual.avg:.2f} / 20")
    print(f"Mention : {processing.compute_mention(annual.avg)}")
    print(f"Décision : {bulletin.decision}")
    if bulletin.appreciations:
        print(f"Appréciations : {bulletin.appreciations}")

def main_cli():
    """Boucle principale de l'application console."""
    global students_data, notes_data

    while True:
        print_menu()
        choice = input("Choisissez une option : ")

        try:
            if choice == '1':
                filepath = input("Chemin du fichier CSV (ex. data/notes.csv) : ")
                filepath = filepath.strip('"').strip("'")
                students_data, notes_data = io_utils.read_records_from_csv(filepath)
                print(f"✅ {len(notes_data)} notes chargées pour {len(students_data)} étudiants.")

            elif choice == '2':
                token = input("Jeton d'accès (Entrée pour la valeur configurée) : ").strip() or config.API_TOKEN
                client = api_client.RecordsClient(config.API_BASE_URL, token=token)
                students_data, notes_data = client.fetch_all()
                print(f"✅ {len(notes_data)} notes chargées pour {len(students_data)} étudiants.")

            elif choice == '3':
                if not students_data:
                    print("ℹ️ Aucun étudiant chargé.")
                else:
                    print("\n--- Liste des bulletins ---")
                    for b in processing.build_class_bulletins(students_data, notes_data):
                        print(b)

            elif choice == '4':
                key = input("ID ou matricule de l'étudiant : ")
                view = input("Vue (1, 2 ou all) : ").strip().lower() or "all"
                if view not in ("1", "2", "all"):
                    print("❌ Vue invalide. Valeurs possibles : 1, 2, all.")
                    continue
                compensation = input("Appliquer la compensation ? (o/n) : ").strip().lower() == 'o'
                student = processing.find_student(students_data, key)
                bulletin = processing.build_student_bulletin(student, notes_data, compensation=compensation)
                print_bulletin(bulletin, view)

            elif choice == '5':
                search = input("Nom ou matricule (vide pour tous) : ")
                promotion = input("Promotion (vide pour toutes) : ").strip() or "all"
                found = processing.filter_students(students_data, promotion, search)
                print(f"\n--- {len(found)} étudiant(s) trouvé(s) ---")
                for s in found:
                    print(f"ID: {s.id!s:<6} | {s.full_name:<25} | Matricule : {s.matricule or '—'}")

            elif choice == '6':
                bulletins = processing.build_class_bulletins(students_data, notes_data)
                stats = processing.get_class_statistics(bulletins)
                if not stats:
                    print("ℹ️ Aucun étudiant chargé, statistiques indisponibles.")
                else:
                    print("\n--- Statistiques de la promotion ---")
                    print(f"Effectif : {stats['total_students']}")
                    print(f"Moyenne de la promotion : {stats['class_average']:.2f}")
                    print(f"Meilleur : {stats['best_student'].student.full_name} ({stats['best_student'].average:.2f})")
                    print(f"Plus faible : {stats['worst_student'].student.full_name} ({stats['worst_student'].average:.2f})")
                    print(f"Validés : {stats['validated']} ({stats['success_rate']:.2f} %)")

            elif choice == '7':
                bulletins = processing.build_class_bulletins(students_data, notes_data)
                print("\n--- Classement ---")
                for rank, b in processing.rank_bulletins(bulletins):
                    print(f"{rank:>3}. {b}")

            elif choice == '8':
                if not students_data:
                    print("⚠️ Aucun étudiant chargé. Rien à exporter.")
                    continue
                filepath = input("Chemin du fichier d'export : ")
                filepath = filepath.strip('"').strip("'")
                bulletins = processing.build_class_bulletins(students_data, notes_data)
                io_utils.export_bulletins_to_csv(filepath, bulletins)
                print(f"✅ Bulletins exportés dans {filepath}.")

            elif choice == '9':
                sort_key = input("Clé de tri (name, matricule, avg) : ").lower()
                try:
                    bulletins = processing.build_class_bulletins(students_data, notes_data)
                    sorted_list = processing.sort_bulletins(bulletins, sort_key)
                    print(f"\n--- Bulletins triés par '{sort_key}' ---")
                    for b in sorted_list:
                        print(b)
                except ValueError as ve:
                    print(f"❌ Erreur de tri : {ve}")

            elif choice == '0':
                print("👋 Au revoir !")
                break

            else:
                print("❌ Choix invalide. Entrez un nombre entre 0 et 9.")

        except errors.BulletinAppError as e:
            print(f"❌ Erreur : {e}")
        except Exception as e:
            print(f"❌ Erreur inattendue : {e}")

def run():
    """Point d'entrée de la commande ``bulletins``."""
    logging.basicConfig(level=config.LOG_LEVEL)
    try:
        main_cli()
    except KeyboardInterrupt:
        print("\nProgramme interrompu.")
    except Exception:
        print("\n!!! ERREUR CRITIQUE AU DÉMARRAGE !!!")
        traceback.print_exc()

if __name__ == '__main__':
    run()

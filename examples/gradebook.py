import os
import sys
import numpy as np
import pandas as pd

# Add the src directory to Python path to import local map2d
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


from map2d import Map2D, Map2DConfig, from_frame, to_frame, to_wide_frame



def load_data() -> pd.DataFrame:
    # fake gradebook, one row per (student, course) pair
    rng = np.random.default_rng(0)
    students = ['ann', 'bob', 'cid', 'dee']
    courses = ['math', 'art', 'physics']
    records = []
    for student in students:
        for course in courses:
            if rng.random() < 0.75:
                records.append({'student': student, 'course': course, 'grade': round(float(rng.uniform(2, 5)), 1)})
    return pd.DataFrame(records)


def gradebook():
    config = Map2DConfig(row_label='student', column_label='course', value_label='grade')
    grades: Map2D[str, str, float] = from_frame(load_data(), config)

    print(f"{grades.size()} grades for {len(grades.row_keys())} students")
    for course in sorted(grades.column_keys()):
        column = grades.column_view(course)
        print(f"{course}: mean {np.mean(list(column.values())):.2f} over {len(column)} students")

    # late submission for a new student
    grades.put_all_to_row({'math': 3.5, 'art': 4.0}, 'eve')

    # letter grades, keyed by upper-case course code
    letters = grades.copy_with_conversion(lambda s: s, str.upper, lambda g: 'A' if g >= 4.5 else 'B' if g >= 3.5 else 'C')
    print(to_frame(letters, config))

    print(to_wide_frame(grades, config))


if __name__ == "__main__":

    gradebook()

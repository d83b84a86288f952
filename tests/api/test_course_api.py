"""
Tests for Course API Endpoints

Teacher-side course content and enrollment.
"""

from httpx import AsyncClient


class TestCourseEndpoints:
    """Course creation and content reads."""

    async def test_create_course(self, client: AsyncClient, auth, teacher) -> None:
        response = await client.post(
            "/api/v1/courses/",
            json={"title": "Statistics", "description": "Term 2"},
            headers=auth(teacher.id),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Statistics"
        assert data["id"] > 0

    async def test_student_cannot_create_course(
        self, client: AsyncClient, auth, student
    ) -> None:
        response = await client.post(
            "/api/v1/courses/", json={"title": "Statistics"}, headers=auth(student.id)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"

    async def test_create_course_validation(self, client: AsyncClient, auth, teacher) -> None:
        response = await client.post(
            "/api/v1/courses/", json={"title": ""}, headers=auth(teacher.id)
        )
        assert response.status_code == 422

    async def test_content_visible_to_enrolled_student(
        self, client: AsyncClient, auth, seed, student, course
    ) -> None:
        await seed.competencies(course.id, 2)
        await seed.enroll(student.id, course.id)

        response = await client.get(f"/api/v1/courses/{course.id}", headers=auth(student.id))

        assert response.status_code == 200
        data = response.json()
        assert data["course"]["id"] == course.id
        assert len(data["competencies"]) == 2
        assert [s["id"] for s in data["students"]] == [student.id]

    async def test_content_hidden_from_outsiders(
        self, client: AsyncClient, auth, student, course
    ) -> None:
        response = await client.get(f"/api/v1/courses/{course.id}", headers=auth(student.id))
        assert response.status_code == 403


class TestCompetencyEndpoints:
    async def test_competency_crud(self, client: AsyncClient, auth, teacher, course) -> None:
        created = await client.post(
            f"/api/v1/courses/{course.id}/competencies",
            json={"title": "Mean and median"},
            headers=auth(teacher.id),
        )
        assert created.status_code == 201
        competency_id = created.json()["id"]

        updated = await client.put(
            f"/api/v1/courses/{course.id}/competencies/{competency_id}",
            json={"description": "Central tendency"},
            headers=auth(teacher.id),
        )
        assert updated.status_code == 200
        assert updated.json()["title"] == "Mean and median"
        assert updated.json()["description"] == "Central tendency"

        deleted = await client.delete(
            f"/api/v1/courses/{course.id}/competencies/{competency_id}",
            headers=auth(teacher.id),
        )
        assert deleted.status_code == 204

        missing = await client.delete(
            f"/api/v1/courses/{course.id}/competencies/{competency_id}",
            headers=auth(teacher.id),
        )
        assert missing.status_code == 404


class TestAssignmentAndMaterialEndpoints:
    async def test_create_and_update_assignment(
        self, client: AsyncClient, auth, teacher, course
    ) -> None:
        created = await client.post(
            f"/api/v1/courses/{course.id}/assignments",
            json={
                "title": "Project",
                "type": "project",
                "start_date": "2026-04-01T00:00:00Z",
                "end_date": "2026-04-30T00:00:00Z",
                "max_attempts": 2,
            },
            headers=auth(teacher.id),
        )
        assert created.status_code == 201
        assignment_id = created.json()["id"]

        updated = await client.put(
            f"/api/v1/courses/{course.id}/assignments/{assignment_id}",
            json={"end_date": "2026-03-01T00:00:00Z"},
            headers=auth(teacher.id),
        )
        assert updated.status_code == 422
        assert updated.json()["error"] == "ValidationError"

    async def test_assignment_window_checked_on_create(
        self, client: AsyncClient, auth, teacher, course
    ) -> None:
        response = await client.post(
            f"/api/v1/courses/{course.id}/assignments",
            json={
                "title": "Project",
                "start_date": "2026-04-10T00:00:00Z",
                "end_date": "2026-04-01T00:00:00Z",
            },
            headers=auth(teacher.id),
        )
        assert response.status_code == 422

    async def test_material_lifecycle(self, client: AsyncClient, auth, teacher, course) -> None:
        created = await client.post(
            f"/api/v1/courses/{course.id}/materials",
            json={"title": "Slides", "file_url": "https://files.school.test/slides.pdf"},
            headers=auth(teacher.id),
        )
        assert created.status_code == 201
        material_id = created.json()["id"]

        updated = await client.put(
            f"/api/v1/courses/{course.id}/materials/{material_id}",
            json={"title": "Week 1 slides"},
            headers=auth(teacher.id),
        )
        assert updated.json()["title"] == "Week 1 slides"

        deleted = await client.delete(
            f"/api/v1/courses/{course.id}/materials/{material_id}", headers=auth(teacher.id)
        )
        assert deleted.status_code == 204


class TestEnrollmentEndpoints:
    async def test_bulk_enroll(self, client: AsyncClient, auth, seed, teacher, course) -> None:
        await seed.user("s-1")
        await seed.user("s-2")
        await seed.enroll("s-1", course.id)

        response = await client.post(
            f"/api/v1/courses/{course.id}/enrollments",
            json={"student_ids": ["s-1", "s-2"]},
            headers=auth(teacher.id),
        )

        assert response.status_code == 200
        assert response.json() == [
            {"student_id": "s-1", "outcome": "alreadyEnrolled"},
            {"student_id": "s-2", "outcome": "enrolled"},
        ]

    async def test_enroll_rejects_unknown_ids(
        self, client: AsyncClient, auth, teacher, course
    ) -> None:
        response = await client.post(
            f"/api/v1/courses/{course.id}/enrollments",
            json={"student_ids": ["ghost"]},
            headers=auth(teacher.id),
        )

        assert response.status_code == 422
        assert "ghost" in response.json()["detail"]

    async def test_only_course_teacher_enrolls(
        self, client: AsyncClient, auth, seed, student, course
    ) -> None:
        response = await client.post(
            f"/api/v1/courses/{course.id}/enrollments",
            json={"student_ids": [student.id]},
            headers=auth(student.id),
        )
        assert response.status_code == 403

    async def test_unenroll(
        self, client: AsyncClient, auth, seed, teacher, student, course
    ) -> None:
        await seed.enroll(student.id, course.id)

        response = await client.delete(
            f"/api/v1/courses/{course.id}/enrollments/{student.id}", headers=auth(teacher.id)
        )
        assert response.status_code == 204

        again = await client.delete(
            f"/api/v1/courses/{course.id}/enrollments/{student.id}", headers=auth(teacher.id)
        )
        assert again.status_code == 404
